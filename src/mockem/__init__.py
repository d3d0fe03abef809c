"""
MockEm - Enterprise Mock Data Generator

Generates fictitious, relationally consistent business records for testing
and demos, grouped into business categories.

Features:
- Dependency-aware generation across related schemas (parents before children)
- Foreign keys drawn from the parent rows generated in the same request
- CSV export with a provenance header, multi-schema bundles with a manifest
- HTTP API with per-session daily quotas
"""

__version__ = "0.1.0"

from mockem.errors import (
    CatalogError,
    ConfigError,
    DependencyCycleError,
    InvalidSchemaError,
    MockemError,
    QuotaExceededError,
    SessionExpiredError,
    UnauthenticatedError,
    UnknownCategoryError,
    UnknownSchemaError,
    ValidationError,
)
from mockem.models import (
    Catalog,
    CategoryDefinition,
    ForeignKey,
    GenerationRequest,
    GenerationResult,
    SchemaKind,
)
from mockem.catalog import RelationshipResolver, load_catalog, load_vocabularies
from mockem.generator import Generator
from mockem.output import ExportWriter, to_csv

__all__ = [
    # Core models
    "Catalog",
    "CategoryDefinition",
    "ForeignKey",
    "GenerationRequest",
    "GenerationResult",
    "SchemaKind",
    # Catalog
    "RelationshipResolver",
    "load_catalog",
    "load_vocabularies",
    # Generation and output
    "Generator",
    "ExportWriter",
    "to_csv",
    # Errors
    "MockemError",
    "ValidationError",
    "UnknownCategoryError",
    "InvalidSchemaError",
    "UnknownSchemaError",
    "QuotaExceededError",
    "UnauthenticatedError",
    "SessionExpiredError",
    "ConfigError",
    "CatalogError",
    "DependencyCycleError",
]
