"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import json
import os
import re
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

API_KEY_ENV_VAR = "OPENAI_API_KEY"

DEFAULT_CONFIG_TEXT = """\
# Number of notes to show when running `codemap show`
default_note_count = 3

# Timestamp format for logs (informational)
timestamp_format = "iso8601"

# Project tag for filtering later (informational)
project_name = "my-project"

# Entry-point ranking (optional)
llm_provider = "openai"        # only openai is acted on
llm_model = "gpt-4o-mini"
llm_api_key = ""               # or set OPENAI_API_KEY in env
max_prompt_chars = 4000
"""

_API_KEY_LINE_RE = re.compile(r"^[ \t]*llm_api_key[ \t]*=.*$", re.MULTILINE)


class ConfigError(ValueError):
    """Raised when config.toml cannot be parsed or holds an invalid value."""


@dataclass(slots=True, frozen=True)
class CodemapConfig:
    """Fully merged codemap configuration."""

    default_note_count: int = 3
    timestamp_format: str = "iso8601"
    project_name: str = "my-project"
    llm_provider: str = "openai"
    llm_model: str = "gpt-4o-mini"
    llm_api_key: str | None = None
    max_prompt_chars: int = 4000

    def to_public_dict(self) -> dict[str, object]:
        """Return a serializable snapshot with the credential redacted."""
        return {
            "default_note_count": self.default_note_count,
            "timestamp_format": self.timestamp_format,
            "project_name": self.project_name,
            "llm_provider": self.llm_provider,
            "llm_model": self.llm_model,
            "llm_api_key_present": self.llm_api_key is not None,
            "max_prompt_chars": self.max_prompt_chars,
        }


def default_config() -> CodemapConfig:
    """Build default config."""
    return CodemapConfig()


def load_config_file(config_path: Path) -> dict[str, object]:
    """Load optional config.toml; absent file yields an empty payload."""
    if not config_path.exists():
        return {}
    try:
        with config_path.open("rb") as handle:
            payload = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"config.toml is not valid TOML: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigError("config.toml must contain a top-level table.")
    return payload


def merge_config(
    base: CodemapConfig,
    payload: Mapping[str, object],
    environ: Mapping[str, str] | None = None,
) -> CodemapConfig:
    """Merge defaults, file values, then environment overrides."""
    api_key = _optional_str(payload.get("llm_api_key"), "llm_api_key", base.llm_api_key or "")
    env = os.environ if environ is None else environ
    env_key = env.get(API_KEY_ENV_VAR, "").strip()
    if env_key:
        api_key = env_key
    return CodemapConfig(
        default_note_count=_optional_positive_int(
            payload.get("default_note_count"), "default_note_count", base.default_note_count
        ),
        timestamp_format=_optional_str(
            payload.get("timestamp_format"), "timestamp_format", base.timestamp_format
        ),
        project_name=_optional_str(payload.get("project_name"), "project_name", base.project_name),
        llm_provider=_optional_str(payload.get("llm_provider"), "llm_provider", base.llm_provider),
        llm_model=_optional_str(payload.get("llm_model"), "llm_model", base.llm_model),
        llm_api_key=api_key.strip() or None,
        max_prompt_chars=_optional_positive_int(
            payload.get("max_prompt_chars"), "max_prompt_chars", base.max_prompt_chars
        ),
    )


def load_effective_config(
    config_path: Path,
    environ: Mapping[str, str] | None = None,
) -> CodemapConfig:
    """Load effective config using merge order defaults -> config file -> environment."""
    return merge_config(default_config(), load_config_file(config_path), environ)


def write_default_config(config_path: Path) -> None:
    """Write the commented default config template."""
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(DEFAULT_CONFIG_TEXT, encoding="utf-8")


def set_api_key(config_path: Path, api_key: str) -> None:
    """Store the credential in config.toml, keeping every other line as written."""
    key = api_key.strip()
    if not key:
        raise ConfigError("API key must be a non-empty string.")
    if config_path.exists():
        text = config_path.read_text(encoding="utf-8")
    else:
        text = DEFAULT_CONFIG_TEXT
    line = f"llm_api_key = {json.dumps(key, ensure_ascii=False)}"
    if _API_KEY_LINE_RE.search(text) is not None:
        updated = _API_KEY_LINE_RE.sub(lambda _: line, text, count=1)
    else:
        separator = "" if not text or text.endswith("\n") else "\n"
        updated = f"{text}{separator}{line}\n"
    try:
        parsed = tomllib.loads(updated)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"config.toml is not valid TOML: {exc}") from exc
    if parsed.get("llm_api_key") != key:
        raise ConfigError("Could not store llm_api_key in config.toml.")
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(updated, encoding="utf-8")


def _optional_str(value: object, name: str, default: str) -> str:
    if value is None:
        return default
    if not isinstance(value, str):
        raise ConfigError(f"Config field '{name}' must be a string.")
    return value


def _optional_positive_int(value: object, name: str, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f"Config field '{name}' must be a positive integer.")
    return value
