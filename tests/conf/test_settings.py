import pytest
from pydantic import ValidationError

from dynpack.conf import CONFIG_YAML_ENV_VAR
from dynpack.conf.get_settings import (
    _reset_settings_singleton,
    get_global_settings,
    get_settings_source,
)
from dynpack.conf.settings import CodecSettings


@pytest.fixture
def fresh_settings():
    _reset_settings_singleton()
    yield
    _reset_settings_singleton()


def test_defaults():
    settings = CodecSettings()
    assert settings.MAX_DEPTH == 256
    assert settings.MAX_CONTAINER_LENGTH == 16_777_216
    assert settings.MAX_VARINT_BYTES == 10
    assert settings.MAX_ENCODED_BYTES is None
    assert settings.MAX_DECODED_BYTES is None


def test_settings_are_frozen():
    settings = CodecSettings()
    with pytest.raises(ValidationError):
        settings.MAX_DEPTH = 10


@pytest.mark.parametrize('kwargs', [
    dict(MAX_DEPTH=0),
    dict(MAX_CONTAINER_LENGTH=-1),
    dict(MAX_VARINT_BYTES=0),
    dict(MAX_ENCODED_BYTES=-5),
    dict(UNKNOWN_SETTING=1),
])
def test_invalid_settings(kwargs):
    with pytest.raises(ValidationError):
        CodecSettings(**kwargs)


def test_from_yaml(tmp_path):
    filepath = tmp_path / 'settings.yml'
    filepath.write_text('MAX_DEPTH: 12\nMAX_DECODED_BYTES: 4096\n')
    settings = CodecSettings.from_yaml(filepath=filepath)
    assert settings.MAX_DEPTH == 12
    assert settings.MAX_DECODED_BYTES == 4096
    assert settings.MAX_CONTAINER_LENGTH == 16_777_216


def test_from_empty_yaml(tmp_path):
    filepath = tmp_path / 'empty.yml'
    filepath.write_text('')
    assert CodecSettings.from_yaml(filepath=filepath) == CodecSettings()


def test_from_yaml_extends(tmp_path):
    (tmp_path / 'base.yml').write_text('MAX_DEPTH: 12\nMAX_VARINT_BYTES: 5\n')
    (tmp_path / 'nested').mkdir()
    filepath = tmp_path / 'nested' / 'custom.yml'
    filepath.write_text('extends: ../base.yml\nMAX_DEPTH: 20\n')
    settings = CodecSettings.from_yaml(filepath=str(filepath))
    assert settings.MAX_DEPTH == 20
    assert settings.MAX_VARINT_BYTES == 5


def test_from_yaml_extends_itself(tmp_path):
    (tmp_path / 'a.yml').write_text('extends: b.yml\n')
    (tmp_path / 'b.yml').write_text('extends: a.yml\n')
    with pytest.raises(ValueError, match='extends itself'):
        CodecSettings.from_yaml(filepath=tmp_path / 'a.yml')


def test_from_yaml_missing_file(tmp_path):
    with pytest.raises(ValueError, match='is not a file'):
        CodecSettings.from_yaml(filepath=tmp_path / 'missing.yml')


def test_from_yaml_not_a_dict(tmp_path):
    filepath = tmp_path / 'list.yml'
    filepath.write_text('- 1\n- 2\n')
    with pytest.raises(ValueError, match='cannot be parsed as a dictionary'):
        CodecSettings.from_yaml(filepath=filepath)


def test_from_yaml_invalid_value(tmp_path):
    filepath = tmp_path / 'invalid.yml'
    filepath.write_text('MAX_DEPTH: -3\n')
    with pytest.raises(ValidationError):
        CodecSettings.from_yaml(filepath=filepath)


def test_global_settings_from_env(tmp_path, monkeypatch, fresh_settings):
    filepath = tmp_path / 'global.yml'
    filepath.write_text('MAX_DEPTH: 7\n')
    monkeypatch.setenv(CONFIG_YAML_ENV_VAR, str(filepath))
    settings = get_global_settings()
    assert settings.MAX_DEPTH == 7
    assert get_global_settings() is settings
    assert get_settings_source() == str(filepath)


def test_global_settings_defaults(monkeypatch, fresh_settings):
    monkeypatch.delenv(CONFIG_YAML_ENV_VAR, raising=False)
    assert get_global_settings() == CodecSettings()
    assert get_settings_source() is None


def test_global_settings_cannot_change_source(tmp_path, monkeypatch, fresh_settings):
    monkeypatch.delenv(CONFIG_YAML_ENV_VAR, raising=False)
    get_global_settings()
    filepath = tmp_path / 'other.yml'
    filepath.write_text('MAX_DEPTH: 7\n')
    monkeypatch.setenv(CONFIG_YAML_ENV_VAR, str(filepath))
    with pytest.raises(Exception, match='loading config twice with a different file'):
        get_global_settings()
