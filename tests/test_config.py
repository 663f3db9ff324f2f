from pathlib import Path

import pytest

from recordcrypto.config import Config, DEFAULT_HASH_KEY, HASH_KEY_ENV


def test_missing_file_gives_defaults(tmp_path: Path):
    config = Config.load(tmp_path / "missing.toml", environ={})
    assert config.crypto.hash_key == DEFAULT_HASH_KEY
    assert config.log_level == "INFO"
    config.validate()


def test_load_from_file(tmp_path: Path):
    path = tmp_path / "config.toml"
    path.write_text(
        'log_level = "debug"\n'
        "[crypto]\n"
        f'hash_key = "{"ab" * 32}"\n',
        encoding="utf-8",
    )
    config = Config.load(path, environ={})
    assert config.log_level == "DEBUG"
    assert config.crypto.hash_key == "ab" * 32
    assert config.config_path == path
    config.validate()


def test_environment_overrides_file(tmp_path: Path):
    path = tmp_path / "config.toml"
    path.write_text(f'[crypto]\nhash_key = "{"ab" * 32}"\n', encoding="utf-8")
    config = Config.load(path, environ={HASH_KEY_ENV: "cd" * 32})
    assert config.crypto.hash_key == "cd" * 32


def test_invalid_toml_raises(tmp_path: Path):
    path = tmp_path / "config.toml"
    path.write_text("this is = = not toml", encoding="utf-8")
    with pytest.raises(ValueError):
        Config.load(path, environ={})


@pytest.mark.parametrize("hash_key", ["nothex", "ab" * 8 + "a", "ab" * 15, "ab" * 65])
def test_validate_rejects_bad_hash_key(hash_key):
    config = Config()
    config.crypto.hash_key = hash_key
    with pytest.raises(ValueError):
        config.validate()


def test_validate_rejects_bad_log_level():
    config = Config(log_level="LOUD")
    with pytest.raises(ValueError):
        config.validate()
