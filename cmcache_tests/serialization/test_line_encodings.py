import math

import pytest

from cmcache.serialization import BadDataError, Deserializer, MalformedFloatError, OutOfDataError, Serializer
from cmcache.serialization.encoding.bytes import decode_bytes, encode_bytes
from cmcache.serialization.encoding.float import decode_float, encode_float
from cmcache.serialization.encoding.line import decode_count, decode_decimal, encode_decimal


def _encode(encoder, value) -> bytes:
    se = Serializer.build_bytes_serializer()
    encoder(se, value)
    return se.finalize()


@pytest.mark.parametrize('n', [
    0,
    1,
    -1,
    2**63 - 1,
    -(2**63),
    2**64,
    3**1000,
    # above the default int/str conversion limit of the interpreter
    10**4299 + 7,
    -(10**9000) - 12345,
    10**12001 - 1,
], ids=lambda n: f'{n.bit_length()}-bits')
def test_decimal_keeps_every_digit(n):
    encoded = _encode(encode_decimal, n)
    assert encoded.endswith(b'\n')
    assert encoded.count(b'\n') == 1
    de = Deserializer.build_bytes_deserializer(encoded)
    assert decode_decimal(de) == n
    de.finalize()


def test_decimal_text_of_a_huge_int():
    n = 10**8000
    assert _encode(encode_decimal, n) == b'1' + b'0' * 8000 + b'\n'


@pytest.mark.parametrize('line', [b'\n', b'+1\n', b' 1\n', b'1_000\n', b'0x10\n', b'--1\n', b'1.0\n'])
def test_decimal_rejects_non_digits(line):
    de = Deserializer.build_bytes_deserializer(line)
    with pytest.raises(BadDataError):
        decode_decimal(de)


def test_count_cannot_be_negative():
    de = Deserializer.build_bytes_deserializer(b'-3\n')
    with pytest.raises(BadDataError):
        decode_count(de)


@pytest.mark.parametrize('value, text', [
    (3.14, b'3.14\n'),
    (-2.5, b'-2.5\n'),
    (0.0, b'0.0\n'),
    (1e300, b'1e+300\n'),
    (math.inf, b'Infinity\n'),
    (-math.inf, b'-Infinity\n'),
    (math.nan, b'NaN\n'),
])
def test_float_text(value, text):
    assert _encode(encode_float, value) == text


@pytest.mark.parametrize('value', [0.1, -0.0, 5e-324, 1.7976931348623157e308, 123456789.123456789, -1e-10])
def test_finite_float_round_trip(value):
    de = Deserializer.build_bytes_deserializer(_encode(encode_float, value))
    decoded = decode_float(de)
    assert decoded == value
    assert math.copysign(1.0, decoded) == math.copysign(1.0, value)


@pytest.mark.parametrize('text', [b'Infinity', b'infinity\n', b'INFINITY\n', b'InFiNiTy\n'])
def test_positive_infinity_is_case_insensitive(text):
    assert decode_float(Deserializer.build_bytes_deserializer(text)) == math.inf


@pytest.mark.parametrize('text', [b'-Infinity\n', b'-infinity\n', b'-INFINITY\n'])
def test_negative_infinity_is_case_insensitive(text):
    assert decode_float(Deserializer.build_bytes_deserializer(text)) == -math.inf


@pytest.mark.parametrize('text', [b'NaN\n', b'nan\n', b'NAN\n'])
def test_nan_is_case_insensitive(text):
    assert math.isnan(decode_float(Deserializer.build_bytes_deserializer(text)))


@pytest.mark.parametrize('text', [b'inf\n', b'-nan\n', b'\n', b'-\n', b'1.2.3\n', b'1e\n', b'x1\n', b'\xff\n'])
def test_malformed_float(text):
    with pytest.raises(MalformedFloatError):
        decode_float(Deserializer.build_bytes_deserializer(text))


def test_bytes_payload_may_hold_any_byte():
    payload = bytes(range(256)) + b'\n\n'
    encoded = _encode(encode_bytes, payload)
    assert encoded.startswith(b'258\n')
    de = Deserializer.build_bytes_deserializer(encoded)
    assert decode_bytes(de) == payload
    de.finalize()


def test_bytes_missing_final_newline():
    de = Deserializer.build_bytes_deserializer(b'3\nabc')
    with pytest.raises(OutOfDataError):
        decode_bytes(de)
