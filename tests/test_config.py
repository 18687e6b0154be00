from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from utilities.config import get_config

EXAMPLE_CONFIG = Path(__file__).resolve().parent.parent / "configuration" / "config.example.yaml"


def test_example_config_loads_as_frozen_box() -> None:
    config = get_config(str(EXAMPLE_CONFIG))

    assert config.counter.command_prefix == "!emoji"
    assert config.counter.placeholder_name == "User"
    assert config.persistence.enabled is False
    assert config.style.embed_colors.error == 0xED4245
    assert dict(config.cogs[0])["cogs.emoji_counter"]["class"] == "EmojiCounter"


def test_optional_sections_get_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text(
        """
bot: {short_name: t, full_name: T, prefix: "t!"}
logging: {console_level: info, output_level: info}
style:
  embed_colors: {default: 1, success: 2, error: 3, warning: 4, info: 5}
  emojis: {success: a, error: b, warning: c, info: d}
cogs: []
""",
        encoding="utf-8",
    )

    config = get_config(str(path))

    assert config.counter.command_prefix == "!emoji"
    assert config.persistence.autosave_seconds == 300
    assert config.auth is None


def test_invalid_config_raises(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("bot: {short_name: t}\n", encoding="utf-8")

    with pytest.raises(ValidationError):
        get_config(str(path))


def test_empty_or_missing_config_raises(tmp_path: Path) -> None:
    empty = tmp_path / "empty.yaml"
    empty.write_text("", encoding="utf-8")

    with pytest.raises(ValueError):
        get_config(str(empty))
    with pytest.raises(FileNotFoundError):
        get_config(str(tmp_path / "missing.yaml"))
