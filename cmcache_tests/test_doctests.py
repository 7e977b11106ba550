import doctest
import importlib

import pytest

MODULES_WITH_DOCTESTS = [
    'cmcache',
    'cmcache.model',
    'cmcache.utils.dict',
    'cmcache.serialization.encoding.line',
    'cmcache.serialization.encoding.float',
    'cmcache.serialization.encoding.bytes',
    'cmcache.serialization.compound_encoding.collection',
    'cmcache.serialization.compound_encoding.mapping',
    'cmcache.compiled_file.marshal',
]


@pytest.mark.parametrize('module_name', MODULES_WITH_DOCTESTS)
def test_doctests(module_name):
    module = importlib.import_module(module_name)
    result = doctest.testmod(module)
    assert result.attempted > 0
    assert result.failed == 0
