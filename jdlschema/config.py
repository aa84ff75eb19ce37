# File: jdlschema/config.py
"""
jdlschema - Configuration loading
=================================
Reads ``jdlschema.config.yaml`` (or any YAML/JSON file given explicitly)
into a validated ``GeneratorConfig``.

Keys may sit at the top level or under a ``project:`` mapping; top-level
keys win. Both camelCase (``pluralOverrides``) and snake_case
(``plural_overrides``) spellings are accepted. Command-line values are merged
last and win over the file.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml
from pydantic import ValidationError as PydanticValidationError

from jdlschema.models import GeneratorConfig

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("jdlschema.config")

DEFAULT_CONFIG_NAMES: List[str] = [
    "jdlschema.config.yaml",
    "jdlschema.config.yml",
]


# ---------------------------------------------------------------------------
# File loaders
# ---------------------------------------------------------------------------


def _load_json_file(path: Path) -> Dict[str, Any]:
    """Load and parse a JSON file. Raises ValueError on parse errors."""
    try:
        data: Any = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a JSON object at top level, got {type(data).__name__}."
        )
    return data


def _load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML file. An empty file is an empty mapping."""
    try:
        data: Any = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a YAML mapping at top level, got {type(data).__name__}."
        )
    return data


def load_config_file(path: Path) -> Dict[str, Any]:
    """
    Load a configuration file (YAML or JSON) into a flat dictionary.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file can't be parsed.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    if not path.is_file():
        raise ValueError(f"Config path is not a file: {path}")

    if path.suffix.lower() == ".json":
        raw: Dict[str, Any] = _load_json_file(path)
    else:
        raw = _load_yaml_file(path)

    logger.info("Using config: %s", path)
    return flatten_config(raw)


def flatten_config(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge a nested ``project:`` section under the top-level keys."""
    merged: Dict[str, Any] = {}
    project: Any = raw.get("project")
    if isinstance(project, dict):
        merged.update(project)
    merged.update({k: v for k, v in raw.items() if k != "project"})
    return merged


def find_config_file(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Return the first default config file in *start_dir* (cwd by default)."""
    base: Path = Path(start_dir) if start_dir is not None else Path.cwd()
    for name in DEFAULT_CONFIG_NAMES:
        candidate: Path = base / name
        if candidate.is_file():
            return candidate
    return None


# ---------------------------------------------------------------------------
# Config construction
# ---------------------------------------------------------------------------


def _field_lookup() -> Dict[str, str]:
    """Map both spellings of every config field to its Python name."""
    lookup: Dict[str, str] = {}
    for name, info in GeneratorConfig.model_fields.items():
        lookup[name] = name
        if info.alias:
            lookup[info.alias] = name
    return lookup


def normalize_keys(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Rename camelCase keys to field names and drop keys the compiler does not
    use, so a config file shared with other tools still loads.
    """
    lookup: Dict[str, str] = _field_lookup()
    data: Dict[str, Any] = {}
    for key, value in raw.items():
        name: Optional[str] = lookup.get(str(key))
        if name is None:
            logger.debug("Ignoring unknown config key '%s'.", key)
            continue
        data[name] = value
    return data


def build_config(
    raw: Optional[Mapping[str, Any]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> GeneratorConfig:
    """
    Validate *raw* (plus non-None *overrides*) into a ``GeneratorConfig``.

    ``plural_overrides`` from both sources are merged key by key, the
    override side winning.

    Raises:
        ValueError: If the merged data does not validate.
    """
    data: Dict[str, Any] = normalize_keys(raw or {})
    extra: Dict[str, Any] = normalize_keys(
        {k: v for k, v in (overrides or {}).items() if v is not None}
    )

    extra_plurals: Any = extra.pop("plural_overrides", None)
    data.update(extra)
    if extra_plurals:
        base: Dict[str, Any] = dict(data.get("plural_overrides") or {})
        base.update(extra_plurals)
        data["plural_overrides"] = base

    try:
        return GeneratorConfig.model_validate(data)
    except PydanticValidationError as exc:
        raise ValueError(f"Config validation failed: {exc}") from exc


def load_config(
    path: Optional[Path] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    search_dir: Optional[Path] = None,
) -> GeneratorConfig:
    """
    Load *path*, or the default config file if one exists, and apply
    *overrides*. With no file at all, defaults plus overrides are used.
    """
    config_path: Optional[Path] = Path(path) if path is not None else find_config_file(search_dir)
    raw: Dict[str, Any] = {}
    if config_path is not None:
        raw = load_config_file(config_path)
    else:
        logger.debug("No config file found — using defaults.")
    return build_config(raw, overrides)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "DEFAULT_CONFIG_NAMES",
    "load_config_file",
    "flatten_config",
    "normalize_keys",
    "find_config_file",
    "build_config",
    "load_config",
]

logger.debug("jdlschema.config loaded — %d public symbols.", len(__all__))
