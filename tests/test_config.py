"""Test configuration loading and validation.

Run with: pytest tests/test_config.py -v
"""

import pytest

from keysplit.config import SplitConfig, parse_key_group, get_config, set_config
from keysplit.exceptions import ConfigurationError


def test_defaults():
    config = SplitConfig()

    assert config.pattern is None
    assert config.key_group == 1
    assert config.dated is False
    assert config.on_collision == "suffix"
    assert config.no_match == "carry_forward"
    config.validate()


def test_from_env(monkeypatch):
    monkeypatch.setenv("KEYSPLIT_PATTERN", r"Account: (\d+)")
    monkeypatch.setenv("KEYSPLIT_KEY_GROUP", "account")
    monkeypatch.setenv("KEYSPLIT_DATED", "true")
    monkeypatch.setenv("KEYSPLIT_ON_COLLISION", "fail")
    monkeypatch.setenv("KEYSPLIT_PDF_METHOD", "pdfplumber")
    monkeypatch.setenv("KEYSPLIT_LOG_LEVEL", "info")

    config = SplitConfig.from_env(dotenv=False)

    assert config.pattern == r"Account: (\d+)"
    assert config.key_group == "account"
    assert config.dated is True
    assert config.on_collision == "fail"
    assert config.pdf_method == "pdfplumber"
    assert config.log_level == "INFO"


def test_from_env_defaults(monkeypatch):
    for name in ("KEYSPLIT_PATTERN", "KEYSPLIT_KEY_GROUP", "KEYSPLIT_DATED",
                 "KEYSPLIT_ON_COLLISION", "KEYSPLIT_NO_MATCH", "KEYSPLIT_PDF_METHOD"):
        monkeypatch.delenv(name, raising=False)

    config = SplitConfig.from_env(dotenv=False)

    assert config == SplitConfig(log_level=config.log_level)


@pytest.mark.parametrize("field, value", [
    ("on_collision", "rename"),
    ("no_match", "skip"),
    ("pdf_method", "ocr"),
    ("key_group", 0),
])
def test_validate_rejects_bad_values(field, value):
    config = SplitConfig(**{field: value})

    with pytest.raises(ConfigurationError):
        config.validate()


def test_parse_key_group():
    assert parse_key_group("2") == 2
    assert parse_key_group(" 3 ") == 3
    assert parse_key_group("policy") == "policy"
    assert parse_key_group(1) == 1
    with pytest.raises(ConfigurationError):
        parse_key_group("")


def test_set_config():
    config = SplitConfig(pattern=r"(\w+)")
    set_config(config)
    try:
        assert get_config() is config
    finally:
        set_config(None)
