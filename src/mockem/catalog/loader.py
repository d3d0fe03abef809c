"""
Loads the static catalog and vocabulary definitions from YAML.

Both documents ship inside the package; alternative files can be supplied
through the service configuration.
"""

from __future__ import annotations

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

import yaml

from mockem.catalog.resolver import RelationshipResolver
from mockem.errors import CatalogError
from mockem.models import Catalog, SchemaKind

logger = logging.getLogger(__name__)

CATALOG_FILE = Path(__file__).parent / "catalog.yaml"
VOCABULARIES_FILE = Path(__file__).parent / "vocabularies.yaml"


class Vocabularies(Mapping[str, Tuple[str, ...]]):
    """Read-only named value lists used by the schema generators."""

    def __init__(self, lists: Mapping[str, Any]):
        frozen: Dict[str, Tuple[str, ...]] = {}
        for name, values in lists.items():
            if not isinstance(values, (list, tuple)) or not values:
                raise CatalogError(f"Vocabulary '{name}' must be a non-empty list")
            frozen[name] = tuple(str(v) for v in values)
        self._lists = MappingProxyType(frozen)

    def __getitem__(self, name: str) -> Tuple[str, ...]:
        try:
            return self._lists[name]
        except KeyError:
            raise CatalogError(f"Unknown vocabulary: {name}") from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._lists)

    def __len__(self) -> int:
        return len(self._lists)


def _read_yaml(path: Path) -> Dict[str, Any]:
    path = Path(path)
    if not path.exists():
        raise CatalogError(f"Definition file not found: {path}")

    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise CatalogError(f"Expected a mapping at the top of {path}")
    return data


def load_catalog(path: Optional[Path] = None) -> Catalog:
    """Load and validate the category catalog."""
    path = Path(path) if path else CATALOG_FILE
    catalog = Catalog.from_dict(_read_yaml(path))
    validate_catalog(catalog)

    logger.info(
        f"Loaded {len(catalog.categories)} categories and "
        f"{len(catalog.platforms)} platforms from {path}"
    )
    return catalog


def load_vocabularies(path: Optional[Path] = None) -> Vocabularies:
    """Load the vocabulary lists."""
    path = Path(path) if path else VOCABULARIES_FILE
    vocabularies = Vocabularies(_read_yaml(path))
    logger.info(f"Loaded {len(vocabularies)} vocabularies from {path}")
    return vocabularies


def validate_catalog(catalog: Catalog) -> None:
    """
    Check a catalog for configuration bugs.

    Every schema must be a known kind and belong to one category only,
    relationships must stay inside their category, and each category's
    dependency graph must be acyclic.
    """
    if not catalog.categories:
        raise CatalogError("Catalog defines no categories")

    known = set(SchemaKind.names())
    owners: Dict[str, str] = {}

    for name, category in catalog.categories.items():
        if not category.schemas:
            raise CatalogError(f"Category {name} lists no schemas")

        for schema in category.schemas:
            if schema not in known:
                raise CatalogError(f"Category {name} lists unknown schema: {schema}")
            if schema in owners:
                raise CatalogError(
                    f"Schema {schema} belongs to both {owners[schema]} and {name}"
                )
            owners[schema] = name

        for child, fks in category.relationships.items():
            if not category.has_schema(child):
                raise CatalogError(f"Relationship for {child} is outside category {name}")
            for fk in fks:
                if not category.has_schema(fk.schema):
                    raise CatalogError(
                        f"{child}.{fk.field} references {fk.schema}, "
                        f"which is not in category {name}"
                    )

        # Raises DependencyCycleError on a cyclic map
        RelationshipResolver.order(category, list(category.schemas))
