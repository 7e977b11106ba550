import pytest

from cmcache.serialization import Deserializer, OutOfDataError, SerializationError, Serializer


def test_read_line_includes_newline():
    de = Deserializer.build_bytes_deserializer(b'abc\ndef\n')
    assert de.read_line() == b'abc\n'
    assert de.cur_pos() == 4
    assert de.read_line() == b'def\n'
    assert de.is_empty()


def test_read_line_without_newline_reads_to_the_end():
    de = Deserializer.build_bytes_deserializer(b'abc\nlast')
    de.read_line()
    assert de.read_line() == b'last'
    assert de.is_empty()
    with pytest.raises(OutOfDataError):
        de.read_line()


def test_read_bytes_does_not_stop_at_newlines():
    de = Deserializer.build_bytes_deserializer(b'a\nb\nc')
    assert de.read_bytes(4) == b'a\nb\n'
    assert de.remaining() == 1


def test_read_bytes_past_the_end():
    de = Deserializer.build_bytes_deserializer(b'abc')
    with pytest.raises(OutOfDataError):
        de.read_bytes(4)
    # a failed read doesn't move the cursor
    assert de.cur_pos() == 0
    assert de.read_bytes(3) == b'abc'


def test_skip():
    de = Deserializer.build_bytes_deserializer(b'x\ny')
    de.skip(2)
    assert de.read_byte() == ord('y')
    with pytest.raises(OutOfDataError):
        de.skip(1)
    with pytest.raises(ValueError):
        de.skip(-1)


def test_peek_does_not_consume():
    de = Deserializer.build_bytes_deserializer(b'xy')
    assert de.peek_byte() == ord('x')
    assert de.peek_bytes(2) == b'xy'
    assert de.cur_pos() == 0
    with pytest.raises(OutOfDataError):
        de.peek_bytes(3)


def test_read_byte_on_empty_buffer():
    de = Deserializer.build_bytes_deserializer(b'')
    assert de.is_empty()
    with pytest.raises(OutOfDataError):
        de.read_byte()


def test_read_all_and_finalize():
    de = Deserializer.build_bytes_deserializer(bytearray(b'rest'))
    assert de.read_all() == b'rest'
    de.finalize()


def test_finalize_with_trailing_data():
    de = Deserializer.build_bytes_deserializer(b'rest')
    de.read_byte()
    with pytest.raises(SerializationError, match='trailing data'):
        de.finalize()


def test_deserializer_owns_a_copy_of_the_data():
    data = bytearray(b'ab')
    de = Deserializer.build_bytes_deserializer(data)
    data[0] = ord('z')
    assert de.read_byte() == ord('a')


def test_bytes_serializer():
    se = Serializer.build_bytes_serializer()
    se.write_byte(ord('t'))
    se.write_bytes(memoryview(b'\n'))
    se.write_line('42')
    assert se.cur_pos() == 5
    assert se.finalize() == b't\n42\n'
