"""Configuration loading for harnify (.harnify.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".harnify.yml"

DEFAULT_CONTEXT_WINDOW = 200_000
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3847

# Context window sizes by model family, in tokens.
MODEL_CONTEXT_WINDOWS: Dict[str, int] = {
    "claude-opus": 200_000,
    "claude-sonnet": 200_000,
    "claude-haiku": 200_000,
    "gpt-4": 128_000,
}


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class LintConfig:
    """Lint settings from the ``lint`` block."""

    context_window: Optional[int] = None
    model: Optional[str] = None


@dataclass
class ServerConfig:
    """Dashboard server settings from the ``server`` block."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT


@dataclass
class HarnifyConfig:
    """Represents the settings defined in .harnify.yml."""

    root: Path
    include_home: bool = False
    exclude_dirs: List[str] = field(default_factory=list)
    lint: LintConfig = field(default_factory=LintConfig)
    server: ServerConfig = field(default_factory=ServerConfig)


def load_config(config_path: Path) -> HarnifyConfig:
    """Load configuration from disk, returning defaults when the file is absent."""
    config_file = _resolve_config_path(Path(config_path))
    root = config_file.parent.resolve()

    if not config_file.exists():
        return HarnifyConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    lint_data = _as_dict(data.get("lint"))
    lint = LintConfig(
        context_window=_as_int(lint_data.get("context_window")),
        model=_as_str(lint_data.get("model")),
    )
    if lint.context_window is not None and lint.context_window <= 0:
        raise ConfigError("lint.context_window must be a positive integer")
    if lint.model is not None and lint.model not in MODEL_CONTEXT_WINDOWS:
        raise ConfigError(f"Unknown model preset in lint.model: {lint.model}")

    server_data = _as_dict(data.get("server"))
    server = ServerConfig(
        host=_as_str(server_data.get("host")) or DEFAULT_HOST,
        port=_as_int(server_data.get("port")) or DEFAULT_PORT,
    )

    return HarnifyConfig(
        root=root,
        include_home=_as_bool(data.get("include_home")) or False,
        exclude_dirs=_as_str_list(data.get("exclude_dirs")),
        lint=lint,
        server=server,
    )


def resolve_context_window(
    *,
    context_window: Optional[int] = None,
    model: Optional[str] = None,
    config: Optional[LintConfig] = None,
) -> int:
    """Pick the effective context window: explicit size, model, config, default."""
    if context_window is not None:
        if context_window <= 0:
            raise ValueError("context window must be a positive number of tokens")
        return context_window
    if model is not None:
        try:
            return MODEL_CONTEXT_WINDOWS[model]
        except KeyError:
            known = ", ".join(sorted(MODEL_CONTEXT_WINDOWS))
            raise ValueError(f"Unknown model '{model}' (known: {known})") from None
    if config is not None:
        if config.context_window is not None:
            return config.context_window
        if config.model is not None:
            return MODEL_CONTEXT_WINDOWS[config.model]
    return DEFAULT_CONTEXT_WINDOW


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.replace("_", ""))
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "DEFAULT_CONTEXT_WINDOW",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "HarnifyConfig",
    "LintConfig",
    "MODEL_CONTEXT_WINDOWS",
    "ServerConfig",
    "load_config",
    "resolve_context_window",
]
