"""Template pack loader with module-level cache."""
from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml

from vineyard.world.template_models import TemplateCatalog

logger = logging.getLogger(__name__)

_CATALOG_CACHE: dict[str, TemplateCatalog] = {}

# file stem -> top-level key inside the file
_SECTIONS: tuple[tuple[str, str], ...] = (
    ("sins", "sins"),
    ("locations", "layouts"),
    ("archetypes", "archetypes"),
    ("relationships", "relationships"),
    ("town", "town"),
)


def _resolve_template_dir() -> Path:
    raw = os.environ.get("VINEYARD_TEMPLATE_DIR", "").strip()
    if not raw:
        return Path(__file__).resolve().parents[1] / "data" / "templates"
    p = Path(raw)
    if p.is_absolute():
        return p
    return Path.cwd() / p


def _read_yaml(path: Path) -> object:
    return yaml.safe_load(path.read_text(encoding="utf-8"))


def _find_section_file(template_dir: Path, stem: str) -> Path:
    for ext in (".yaml", ".yml"):
        fp = template_dir / f"{stem}{ext}"
        if fp.exists() and fp.is_file():
            return fp
    raise FileNotFoundError(f"Template file not found: {template_dir / stem}.yaml")


def _load_section(template_dir: Path, stem: str, key: str) -> object:
    fp = _find_section_file(template_dir, stem)
    data = _read_yaml(fp)
    if isinstance(data, dict) and key in data:
        return data[key]
    return data


def load_template_catalog(template_dir: Path | str | None = None) -> TemplateCatalog:
    """Load and validate a template pack directory (cached by resolved path).

    Raises FileNotFoundError for a missing directory or table, and
    pydantic.ValidationError for malformed templates.
    """
    base = Path(template_dir) if template_dir else _resolve_template_dir()
    cache_key = str(base.resolve())
    if cache_key in _CATALOG_CACHE:
        return _CATALOG_CACHE[cache_key]
    if not base.exists() or not base.is_dir():
        raise FileNotFoundError(f"Template directory not found: {base}")

    payload = {key: _load_section(base, stem, key) for stem, key in _SECTIONS}
    catalog = TemplateCatalog.model_validate(payload)
    _CATALOG_CACHE[cache_key] = catalog
    logger.info(
        "Loaded template pack: %s (%d sins, %d layouts, %d archetypes)",
        base,
        len(catalog.sins),
        len(catalog.layouts),
        len(catalog.archetypes),
    )
    return catalog


def get_template_catalog() -> TemplateCatalog:
    """Default catalog: VINEYARD_TEMPLATE_DIR or the packaged templates."""
    return load_template_catalog(None)


def clear_template_cache() -> None:
    _CATALOG_CACHE.clear()
