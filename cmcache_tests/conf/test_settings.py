from pathlib import Path

import pytest
from pydantic import ValidationError

from cmcache import CompiledFile, Marshal, TooDeepError
from cmcache.conf.get_settings import CONFIG_YAML_ENV_VAR, get_global_settings, get_settings_source
from cmcache.conf.settings import MAX_DEPTH_LIMIT, CompiledFileSettings


def _write_yaml(path: Path, text: str) -> Path:
    path.write_text(text)
    return path


def test_defaults():
    settings = CompiledFileSettings()
    assert settings.MAGIC == '!RBIX'
    assert settings.VERSION == 0
    assert settings.INTEGRITY_TAG == 'x'
    assert settings.MAX_DEPTH == 128


def test_global_settings_default_to_the_model_defaults():
    assert get_global_settings() == CompiledFileSettings()
    assert get_settings_source() == '<defaults>'


def test_from_yaml(tmp_path):
    filepath = _write_yaml(tmp_path / 'settings.yml', 'MAGIC: "!TEST"\nVERSION: 2\nMAX_DEPTH: 16\n')
    settings = CompiledFileSettings.from_yaml(filepath=filepath)
    assert settings.MAGIC == '!TEST'
    assert settings.VERSION == 2
    assert settings.INTEGRITY_TAG == 'x'
    assert settings.MAX_DEPTH == 16


def test_from_empty_yaml(tmp_path):
    filepath = _write_yaml(tmp_path / 'empty.yml', '')
    assert CompiledFileSettings.from_yaml(filepath=filepath) == CompiledFileSettings()


def test_from_yaml_with_extends(tmp_path):
    _write_yaml(tmp_path / 'base.yml', 'MAGIC: "!BASE"\nVERSION: 5\n')
    filepath = _write_yaml(tmp_path / 'child.yml', 'extends: base.yml\nVERSION: 6\n')
    settings = CompiledFileSettings.from_yaml(filepath=filepath)
    assert settings.MAGIC == '!BASE'
    assert settings.VERSION == 6


def test_from_yaml_with_extends_from_custom_root(tmp_path):
    root = tmp_path / 'root'
    root.mkdir()
    _write_yaml(root / 'base.yml', 'INTEGRITY_TAG: sum\n')
    filepath = _write_yaml(tmp_path / 'child.yml', 'extends: base.yml\n')
    settings = CompiledFileSettings.from_yaml(filepath=filepath, custom_root=root)
    assert settings.INTEGRITY_TAG == 'sum'


def test_from_yaml_with_recursive_extends(tmp_path):
    filepath = _write_yaml(tmp_path / 'loop.yml', 'extends: loop.yml\n')
    with pytest.raises(ValueError):
        CompiledFileSettings.from_yaml(filepath=filepath)


def test_from_yaml_missing_file(tmp_path):
    with pytest.raises(ValueError):
        CompiledFileSettings.from_yaml(filepath=tmp_path / 'missing.yml')


def test_from_yaml_not_a_mapping(tmp_path):
    filepath = _write_yaml(tmp_path / 'list.yml', '- 1\n- 2\n')
    with pytest.raises(ValueError):
        CompiledFileSettings.from_yaml(filepath=filepath)


@pytest.mark.parametrize('values', [
    dict(MAX_DEPTH=0),
    dict(MAX_DEPTH=-1),
    dict(MAX_DEPTH=MAX_DEPTH_LIMIT + 1),
    dict(MAGIC='!RB\nIX'),
    dict(INTEGRITY_TAG='x\n'),
    dict(VERSION='zero'),
    dict(UNKNOWN=1),
])
def test_invalid_settings(values):
    with pytest.raises(ValidationError):
        CompiledFileSettings(**values)


def test_settings_are_frozen():
    settings = CompiledFileSettings()
    with pytest.raises(ValidationError):
        settings.MAGIC = '!OTHER'


def test_global_settings_from_env_var(tmp_path, monkeypatch):
    filepath = _write_yaml(tmp_path / 'settings.yml', 'MAGIC: "!ENV"\nMAX_DEPTH: 2\n')
    monkeypatch.setenv(CONFIG_YAML_ENV_VAR, str(filepath))
    settings = get_global_settings()
    assert settings.MAGIC == '!ENV'
    assert get_global_settings() is settings
    assert get_settings_source() == str(filepath)

    assert CompiledFile.from_settings(True).encode(True) == b'!ENV\n0\nx\nt\n'
    assert Marshal().max_depth == 2
    with pytest.raises(TooDeepError):
        Marshal().marshal([[[1]]])


def test_global_settings_source_cannot_change(tmp_path, monkeypatch):
    get_global_settings()
    filepath = _write_yaml(tmp_path / 'settings.yml', 'VERSION: 1\n')
    monkeypatch.setenv(CONFIG_YAML_ENV_VAR, str(filepath))
    with pytest.raises(Exception, match='loading config twice'):
        get_global_settings()


def test_yaml_cannot_raise_the_depth_past_the_limit(tmp_path):
    filepath = _write_yaml(tmp_path / 'deep.yml', 'MAX_DEPTH: 1000000\n')
    with pytest.raises(ValidationError):
        CompiledFileSettings.from_yaml(filepath=filepath)
    assert CompiledFileSettings(MAX_DEPTH=MAX_DEPTH_LIMIT).MAX_DEPTH == MAX_DEPTH_LIMIT
