"""
Core data models for the mockem package.

Defines the static catalog structures (categories, schemas, relationship maps)
and the request/result objects that flow through generation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pandas as pd

from mockem.errors import UnknownCategoryError

MIN_ROW_COUNT = 1
MAX_ROW_COUNT = 100
PREVIEW_ROWS = 10

DEFAULT_PLATFORM = "general"

# A generated row: field name -> scalar (str, int, float, datetime or None)
Row = Dict[str, Any]


class SchemaKind(str, Enum):
    """The closed set of entity types mockem knows how to generate."""
    COMPANIES = "companies"
    CONTACTS = "contacts"
    OPPORTUNITIES = "opportunities"
    ACCOUNTS = "accounts"
    TRANSACTIONS = "transactions"
    VENDORS = "vendors"
    EMPLOYEES = "employees"
    DEPARTMENTS = "departments"
    CAMPAIGNS = "campaigns"
    LEADS = "leads"
    PRODUCTS = "products"
    ORDERS = "orders"
    SUPPLIERS = "suppliers"

    @classmethod
    def names(cls) -> List[str]:
        return [kind.value for kind in cls]


@dataclass(frozen=True)
class ForeignKey:
    """A child schema's dependency on a parent schema via one key field."""
    schema: str
    field: str

    def to_dict(self) -> Dict[str, str]:
        return {"schema": self.schema, "field": self.field}

    @classmethod
    def from_dict(cls, data: Mapping[str, str]) -> ForeignKey:
        return cls(schema=data["schema"], field=data["field"])


@dataclass(frozen=True)
class CategoryDefinition:
    """A business domain owning a list of schemas and their relationship map."""
    name: str
    title: str
    schemas: Tuple[str, ...]
    relationships: Mapping[str, Tuple[ForeignKey, ...]] = field(default_factory=dict)
    description: str = ""

    def has_schema(self, schema: str) -> bool:
        return schema in self.schemas

    def dependencies_of(self, schema: str) -> Tuple[ForeignKey, ...]:
        """Foreign keys declared by a schema (empty when it has none)."""
        return tuple(self.relationships.get(schema, ()))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "title": self.title,
            "description": self.description,
            "schemas": list(self.schemas),
            "relationships": {
                child: [fk.to_dict() for fk in fks]
                for child, fks in self.relationships.items()
            },
        }

    @classmethod
    def from_dict(cls, name: str, data: Mapping[str, Any]) -> CategoryDefinition:
        """Create from dictionary."""
        relationships = {
            child: tuple(ForeignKey.from_dict(fk) for fk in (fks or []))
            for child, fks in (data.get("relationships") or {}).items()
        }
        return cls(
            name=name,
            title=data.get("title", name),
            description=data.get("description", ""),
            schemas=tuple(data.get("schemas", [])),
            relationships=relationships,
        )


@dataclass(frozen=True)
class Catalog:
    """All categories and platforms; loaded once at startup, never mutated."""
    categories: Mapping[str, CategoryDefinition] = field(default_factory=dict)
    platforms: Mapping[str, str] = field(default_factory=dict)

    def get_category(self, name: str) -> CategoryDefinition:
        """Look up a category, raising UnknownCategoryError if absent."""
        try:
            return self.categories[name]
        except KeyError:
            raise UnknownCategoryError(name) from None

    def has_platform(self, name: str) -> bool:
        return name in self.platforms

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "platforms": dict(self.platforms),
            "categories": {
                name: {k: v for k, v in category.to_dict().items() if k != "name"}
                for name, category in self.categories.items()
            },
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Catalog:
        """Create from dictionary."""
        categories = {
            name: CategoryDefinition.from_dict(name, cdata or {})
            for name, cdata in (data.get("categories") or {}).items()
        }
        return cls(categories=categories, platforms=dict(data.get("platforms") or {}))


@dataclass
class GenerationRequest:
    """A caller's ask: one row count applied to every requested schema."""
    category: str
    schemas: List[str]
    row_count: int
    platform: str = DEFAULT_PLATFORM
    seed: Optional[int] = None

    def __post_init__(self):
        if isinstance(self.schemas, str):
            self.schemas = [s.strip() for s in self.schemas.split(",") if s.strip()]
        else:
            self.schemas = list(self.schemas)

    @property
    def total_rows(self) -> int:
        """Rows a batch will hold; repeated schema names count once."""
        return self.row_count * len(dict.fromkeys(self.schemas))


@dataclass
class GenerationResult:
    """Rows produced for one request, keyed by schema name."""
    category: str
    platform: str
    order: List[str]
    data: Dict[str, List[Row]]
    unresolved_references: Dict[str, List[str]] = field(default_factory=dict)
    seed: Optional[int] = None
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def total_rows(self) -> int:
        return sum(len(rows) for rows in self.data.values())

    @property
    def schemas(self) -> List[str]:
        return list(self.data.keys())

    def preview(self, limit: int = PREVIEW_ROWS) -> Dict[str, List[Row]]:
        """First `limit` rows of each schema; the full data is left intact."""
        return {schema: rows[:limit] for schema, rows in self.data.items()}

    def columns(self, schema: str) -> List[str]:
        rows = self.data.get(schema) or []
        return list(rows[0].keys()) if rows else []

    def to_frames(self) -> Dict[str, pd.DataFrame]:
        """Return one object-dtype DataFrame per schema (ints and None kept as-is)."""
        return {
            schema: pd.DataFrame(rows, columns=self.columns(schema), dtype=object)
            for schema, rows in self.data.items()
        }
