from pathlib import Path

import pytest
from pydantic import ValidationError

from sitegate.config import Settings, load_config
from sitegate.policy import UrlPolicy


def test_load_config_defaults_without_path(tmp_path: Path) -> None:
    assert load_config(None) == Settings()
    assert load_config(str(tmp_path / "missing.yaml")) == Settings()


def test_load_config_reads_yaml(tmp_path: Path) -> None:
    cfg = tmp_path / "sitegate.yaml"
    cfg.write_text(
        "\n".join(
            [
                "log_level: DEBUG",
                "policy:",
                "  mode: combined",
                "  allow_patterns:",
                "    - reddit.com/r/askscience/*",
                "  deny_patterns:",
                "    - pattern: reddit.com",
                "  deny_keywords:",
                "    - /casino/i",
            ]
        )
    )
    settings = load_config(str(cfg))
    assert settings.log_level == "DEBUG"
    assert settings.policy.mode == "combined"
    assert settings.policy.deny_patterns == ["reddit.com"]

    policy = UrlPolicy.from_config(settings.policy)
    assert policy.is_allowed("https://reddit.com/r/askscience") is True
    assert policy.is_allowed("https://reddit.com/r/news") is False
    assert policy.evaluate("https://example.com/CASINO").reason == "keyword: /casino/i"


def test_empty_yaml_gives_defaults(tmp_path: Path) -> None:
    cfg = tmp_path / "empty.yaml"
    cfg.write_text("")
    settings = load_config(str(cfg))
    assert settings.policy.mode == "blacklist"
    assert settings.policy.enabled is True


def test_scalar_entry_list_is_a_validation_error(tmp_path: Path) -> None:
    cfg = tmp_path / "bad.yaml"
    cfg.write_text("policy:\n  deny_patterns: 5\n")
    with pytest.raises(ValidationError):
        load_config(str(cfg))
