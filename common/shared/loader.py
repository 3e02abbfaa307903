"""
Shared configuration loading and validation helpers.

Provides:
 - `load_config`: basic YAML loader
 - `load_logging_config`: the root `logging` section of a config file
 - `load_task_config`: validated configuration for a given task
 - `cli_main`: command-line entry point exposed as the `config-check` script
"""

from __future__ import annotations

import argparse
import base64
import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

from common.base.file_io import read_yaml


ConfigDict = Dict[str, Any]

DEFAULT_CONFIG_FILENAME = "config.yaml"
LOGGING_SECTION_KEY = "logging"
TASKS_SECTION_KEY = "tasks"
CONFIGS_DIR = Path(__file__).resolve().parents[2] / "configs"


TASK_SCHEMAS: Dict[str, Dict[str, Iterable[str]]] = {
    "str_clear": {
        "required": [],
        "optional": [
            "workers",
            "clear_char",
            "path_mode",
            "text_only",
            "binary_only",
            "verbose",
            "progress",
            "report_dir",
        ],
    },
    "dir_sync": {
        "required": [],
        "optional": ["exclude", "skip_hidden", "fix_symlinks", "verbose", "listfile"],
    },
}

FIELD_ALIASES = {
    "threads": "workers",
    "paths": "path_mode",
    "excludes": "exclude",
}

SINGLE_PATH_FIELDS = {"report_dir", "listfile"}
BOOLEAN_FIELDS = {"path_mode", "text_only", "binary_only", "verbose", "progress", "skip_hidden", "fix_symlinks"}
INTEGER_FIELDS = {"workers"}
STRING_LIST_FIELDS = {"exclude"}
LOGGING_ALLOWED_KEYS = {"level", "use_rich", "log_dir", "file_prefix"}

YES_VALUES = {"1", "true", "yes", "y", "on"}
NO_VALUES = {"0", "false", "no", "n", "off"}


def load_config(path: str | Path | None) -> Mapping[str, Any] | Dict[str, Any]:
    if not path:
        return {}

    cfg_path = Path(path).expanduser()
    if not cfg_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {cfg_path}")

    data = read_yaml(cfg_path)
    if not isinstance(data, Mapping):
        raise ValueError(f"Configuration root must be a mapping in {cfg_path}")

    return data


def load_logging_config(config_path: str | Path | None = None) -> Dict[str, Any]:
    """Root logging section; falls back to configs/config.yaml when no path is given."""
    resolved_path = _resolve_config_path(config_path)
    settings = _extract_logging_settings(load_config(resolved_path))
    if settings.get("log_dir") and resolved_path:
        settings["log_dir"] = _anchor_path(settings["log_dir"], resolved_path.parent)
    return settings


def load_task_config(task: str, config_path: str | Path | None = None) -> ConfigDict:
    """
    Load and validate the configuration block of one task.

    Without an explicit path the repository default (configs/config.yaml) is
    used when present; otherwise every option keeps its built-in default.
    The merged logging section is returned under ``__logging__``.
    """
    if task not in TASK_SCHEMAS:
        raise ValueError(f"Unknown task '{task}'. Expected one of: {', '.join(sorted(TASK_SCHEMAS))}")

    resolved_path = _resolve_config_path(config_path)
    root_config = dict(load_config(resolved_path))
    task_config_raw = _extract_task_config(root_config, task, resolved_path)

    task_logging_override: Dict[str, Any] = {}
    if "logging" in task_config_raw:
        logging_payload = task_config_raw.pop("logging")
        if not isinstance(logging_payload, Mapping):
            raise ValueError(f"Task '{task}' logging section must be a mapping in {resolved_path}")
        task_logging_override = dict(logging_payload)
        invalid_logging_keys = [key for key in task_logging_override if key not in LOGGING_ALLOWED_KEYS]
        if invalid_logging_keys:
            invalid_keys = ", ".join(sorted(invalid_logging_keys))
            raise ValueError(
                f"Task '{task}' logging section contains unsupported keys in {resolved_path}: {invalid_keys}"
            )
    config = _apply_aliases(task_config_raw)

    schema = TASK_SCHEMAS[task]
    required = set(schema.get("required", []))
    optional = set(schema.get("optional", []))
    allowed_keys = required | optional

    missing = [key for key in required if not config.get(key)]
    if missing:
        raise ValueError(
            f"Configuration '{resolved_path}' missing required fields for task '{task}': {', '.join(missing)}"
        )

    unexpected = sorted(key for key in config if key not in allowed_keys)
    if unexpected:
        raise ValueError(
            f"Configuration '{resolved_path}' contains unsupported keys for task '{task}': {', '.join(unexpected)}"
        )

    normalized: ConfigDict = {}
    for key, value in config.items():
        if value is None:
            continue
        if key in SINGLE_PATH_FIELDS:
            normalized[key] = _normalize_single_path(value)
        elif key in BOOLEAN_FIELDS:
            normalized[key] = _coerce_yes_no(value, key, resolved_path)
        elif key in INTEGER_FIELDS:
            if value == "":
                continue
            normalized[key] = _coerce_int(value, key, resolved_path)
        elif key in STRING_LIST_FIELDS:
            normalized[key] = _normalize_string_list(value)
        else:
            normalized[key] = str(value)

    normalized["__task__"] = task
    normalized["__config_path__"] = str(resolved_path) if resolved_path else None

    merged_logging = _extract_logging_settings(root_config)
    if task_logging_override:
        merged_logging.update(task_logging_override)
    if merged_logging.get("log_dir") and resolved_path:
        merged_logging["log_dir"] = _anchor_path(merged_logging["log_dir"], resolved_path.parent)
    if merged_logging:
        normalized["__logging__"] = merged_logging
    return normalized


def _apply_aliases(config: Mapping[str, Any]) -> ConfigDict:
    result: ConfigDict = {}
    for key, value in config.items():
        canonical = FIELD_ALIASES.get(key, key)
        result[canonical] = value
    return result


def _normalize_single_path(value: Any) -> str:
    return str(Path(str(value)).expanduser())


def _normalize_string_list(value: Any) -> List[str]:
    if isinstance(value, (list, tuple, set)):
        return [str(item) for item in value if str(item)]
    text = str(value)
    return [text] if text else []


def _anchor_path(value: Any, base: Path) -> str:
    path = Path(str(value)).expanduser()
    if path.is_absolute():
        return str(path)
    return str((base / path).resolve())


def _coerce_int(value: Any, field: str, config_path: Optional[Path]) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Configuration '{config_path}' field '{field}' must be an integer.")
    try:
        return int(str(value).strip())
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Configuration '{config_path}' field '{field}' must be an integer.") from exc


def _coerce_yes_no(value: object, key: str, config_path: Optional[Path]) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in YES_VALUES:
        return True
    if text in NO_VALUES:
        return False
    raise ValueError(f"Configuration '{config_path}' field '{key}' must be a boolean (yes/no, true/false).")


def _resolve_config_path(config_path: str | Path | None) -> Optional[Path]:
    if config_path:
        return Path(config_path).expanduser()

    candidate = CONFIGS_DIR / DEFAULT_CONFIG_FILENAME
    return candidate if candidate.exists() else None


def _extract_task_config(root: Mapping[str, Any], task: str, config_path: Optional[Path]) -> ConfigDict:
    tasks_section = root.get(TASKS_SECTION_KEY) or {}
    if not isinstance(tasks_section, Mapping):
        raise ValueError(f"'{TASKS_SECTION_KEY}' section must be a mapping in {config_path}")
    task_payload = tasks_section.get(task) or {}
    if not isinstance(task_payload, Mapping):
        raise ValueError(f"Task '{task}' entry must be a mapping in {config_path}")
    return dict(task_payload)


def _extract_logging_settings(root: Mapping[str, Any]) -> Dict[str, Any]:
    section = root.get(LOGGING_SECTION_KEY, {})
    return dict(section) if isinstance(section, Mapping) else {}


def cli_main(argv: Optional[Iterable[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Load and validate build-tools YAML configs.")
    parser.add_argument("task", help=f"Task identifier ({', '.join(sorted(TASK_SCHEMAS))})")
    parser.add_argument("config_path", nargs="?", help="Path to YAML file (defaults to configs/config.yaml)")
    parser.add_argument(
        "--format",
        choices={"b64", "json"},
        default="json",
        help="Output format: raw JSON (default) or base64-encoded JSON.",
    )
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        config = load_task_config(args.task, args.config_path)
    except (FileNotFoundError, ValueError) as exc:
        parser.error(str(exc))
    payload = json.dumps(config, sort_keys=True)

    if args.format == "json":
        print(payload)
    else:
        print(base64.b64encode(payload.encode("utf-8")).decode("utf-8"))
    return 0


if __name__ == "__main__":
    raise SystemExit(cli_main())
