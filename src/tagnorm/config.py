"""Configuration loading, merging, and interactive creation."""

from __future__ import annotations

import logging
import os
import pathlib
import tomllib


logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.toml"

_DEFAULTS: dict[str, object] = {
    "workers": 4,
    "artwork": False,
    "exclude": [],
    "exclude_dir": [],
}

_INT_KEYS = {"workers"}
_BOOL_KEYS = {"artwork"}
_LIST_KEYS = {"exclude", "exclude_dir"}


def _config_dir() -> pathlib.Path:
    """Return the tagnorm config directory."""
    base = pathlib.Path(os.environ.get("XDG_CONFIG_HOME", "~/.config")).expanduser()
    d = base / "tagnorm"
    d.mkdir(parents=True, exist_ok=True)
    return d


def load_config(config_dir: pathlib.Path | None = None) -> dict:
    """Load config.toml and return its contents as a dict.

    Returns {} if no file exists or on parse error.
    """
    if config_dir is None:
        config_dir = _config_dir()
    path = config_dir / CONFIG_FILENAME
    if not path.exists():
        return {}
    try:
        return tomllib.loads(path.read_text())
    except Exception as exc:
        logger.warning(f"Ignoring unreadable config {path}: {exc}")
        return {}


def _positive_int(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        number = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    return number if number >= 1 else None


def merge_config_into_args(args, config: dict) -> None:
    """Three-layer merge: CLI > config > hardcoded defaults.

    Mutates *args* in place. Keys a subcommand does not define are left alone.
    """
    for key in _INT_KEYS:
        if not hasattr(args, key) or getattr(args, key) is not None:
            continue
        cfg_val = _positive_int(config.get(key))
        setattr(args, key, cfg_val if cfg_val is not None else _DEFAULTS[key])

    for key in _BOOL_KEYS:
        if not hasattr(args, key) or getattr(args, key) is not None:
            continue
        cfg_val = config.get(key)
        if cfg_val is not None:
            setattr(args, key, bool(cfg_val))
        else:
            setattr(args, key, _DEFAULTS[key])

    # List fields: merge CLI + config
    for key in _LIST_KEYS:
        if not hasattr(args, key):
            continue
        cli_val = getattr(args, key) or []
        cfg_val = config.get(key) or []
        setattr(args, key, cli_val + [v for v in cfg_val if v not in cli_val])


def create_config_interactive(
    config_dir: pathlib.Path | None = None,
    input_fn=input,
    print_fn=print,
) -> pathlib.Path:
    """Interactively create or update config.toml.

    Returns the path to the written config file.
    """
    if config_dir is None:
        config_dir = _config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    existing = load_config(config_dir)

    settings: list[tuple[str, str, object]] = [
        ("workers", "Parallel extraction workers", _DEFAULTS["workers"]),
        ("artwork", "Embed artwork in JSON output (true/false)", _DEFAULTS["artwork"]),
        ("exclude", "Exclude file patterns (comma-separated)", _DEFAULTS["exclude"]),
        ("exclude_dir", "Exclude directory patterns (comma-separated)", _DEFAULTS["exclude_dir"]),
    ]

    result: dict[str, object] = {}

    for key, label, hardcoded_default in settings:
        default = existing.get(key, hardcoded_default)
        if isinstance(default, bool):
            shown = str(default).lower()
        elif isinstance(default, list):
            shown = ", ".join(str(v) for v in default)
        else:
            shown = str(default)
        value = input_fn(f"  {label} [{shown}]: ").strip()
        if not value:
            value = shown
        if key in _BOOL_KEYS:
            result[key] = value.lower() in ("true", "1", "yes")
        elif key in _INT_KEYS:
            number = _positive_int(value)
            result[key] = number if number is not None else _DEFAULTS[key]
        elif key in _LIST_KEYS:
            result[key] = [v.strip() for v in value.split(",") if v.strip()]

    # Remove boolean defaults that are False and empty lists to keep config clean
    for key in _BOOL_KEYS:
        if key in result and result[key] is False:
            del result[key]
    for key in _LIST_KEYS:
        if key in result and not result[key]:
            del result[key]

    path = config_dir / CONFIG_FILENAME
    path.write_text(_to_toml(result))
    print_fn(f"Configuration saved to {path}")
    return path


def _to_toml(data: dict) -> str:
    """Serialize a flat dict to TOML format."""
    lines: list[str] = []
    for key, value in data.items():
        if isinstance(value, bool):
            lines.append(f"{key} = {str(value).lower()}")
        elif isinstance(value, list):
            items = ", ".join(f'"{v}"' for v in value)
            lines.append(f"{key} = [{items}]")
        elif isinstance(value, str):
            lines.append(f'{key} = "{value}"')
        elif value is None:
            continue
        else:
            lines.append(f"{key} = {value}")
    return "\n".join(lines) + "\n" if lines else ""
