"""Loading translation catalogs from configuration.

A catalog maps error codes to message templates. It can be a dictionary or
a YAML/JSON file, optionally nested under a top-level ``translations`` key:

    translations:
      required: "{label} is required"
      min_length:
        template: "{label} needs at least {min} characters"

``configure()`` without a source reads the catalog path from the
``FIELDKNOBS_CATALOG`` environment variable.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Union

import yaml  # type: ignore[import-untyped]

from .exceptions import CatalogNotFoundError, ConfigurationError
from .translations import TranslationRegistry, get_registry, to_translation

logger = logging.getLogger(__name__)

ENV_CATALOG = "FIELDKNOBS_CATALOG"

CatalogSource = Union[str, Path, Mapping[str, Any]]


def _read_file(path: Path) -> Any:
    if not path.exists():
        raise CatalogNotFoundError(f"Catalog file not found: {path}", context={"path": str(path)})

    suffix = path.suffix.lower()
    with open(path, encoding="utf-8") as f:
        if suffix in [".yaml", ".yml"]:
            return yaml.safe_load(f)
        elif suffix == ".json":
            return json.load(f)
    raise ConfigurationError(
        f"Unsupported catalog format: {suffix}",
        context={"path": str(path), "supported": [".yaml", ".yml", ".json"]},
    )


def load_catalog(source: CatalogSource) -> Dict[str, Any]:
    """Load and check a catalog.

    Args:
        source: Catalog dictionary or path to a YAML/JSON file

    Returns:
        Mapping of code to entry, ready for ``TranslationRegistry.update``

    Raises:
        CatalogNotFoundError: If the file does not exist
        ConfigurationError: If the format or structure is invalid
    """
    if isinstance(source, Mapping):
        data: Any = source
    elif isinstance(source, (str, Path)):
        data = _read_file(Path(source).resolve())
    else:
        raise ConfigurationError(f"Invalid catalog source type: {type(source)}")

    if data is None:
        return {}
    if isinstance(data, Mapping) and isinstance(data.get("translations"), Mapping):
        data = data["translations"]
    if not isinstance(data, Mapping):
        raise ConfigurationError(
            "Catalog must be a mapping of error codes to templates",
            context={"type": type(data).__name__},
        )

    catalog = {}
    for code, entry in data.items():
        # validate eagerly so a bad file fails at load time
        to_translation(str(code), entry)
        catalog[str(code)] = entry
    logger.debug(f"Loaded catalog with {len(catalog)} entries")
    return catalog


def load_builtin_catalog(locale: str) -> Dict[str, Any]:
    """Load a catalog shipped with the package, e.g. ``"zh_CN"``.

    Raises:
        CatalogNotFoundError: If no catalog exists for the locale
    """
    resource = resources.files("fieldknobs").joinpath("catalogs").joinpath(f"{locale}.yaml")
    if not resource.is_file():
        raise CatalogNotFoundError(f"No built-in catalog for locale: {locale}", context={"locale": locale})
    return load_catalog(yaml.safe_load(resource.read_text(encoding="utf-8")) or {})


def configure(
    source: CatalogSource | None = None,
    registry: TranslationRegistry | None = None,
    replace: bool = False,
) -> TranslationRegistry:
    """Apply a catalog to a registry.

    Args:
        source: Catalog or path; defaults to ``$FIELDKNOBS_CATALOG``
        registry: Target registry (default: process-wide)
        replace: Clear the registry before loading

    Returns:
        The configured registry
    """
    target = registry if registry is not None else get_registry()
    if source is None:
        env_path = os.environ.get(ENV_CATALOG)
        if not env_path:
            return target
        logger.info(f"Loading catalog from ${ENV_CATALOG}: {env_path}")
        source = env_path

    catalog = load_catalog(source)
    if replace:
        target.clear()
    target.update(catalog)
    return target
