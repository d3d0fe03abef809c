"""
Static catalog of categories, schemas, relationship maps and vocabularies.

Provides the relationship resolver that orders schemas by dependency.
"""

from mockem.catalog.loader import (
    Vocabularies,
    load_catalog,
    load_vocabularies,
    validate_catalog,
)
from mockem.catalog.resolver import RelationshipResolver

__all__ = [
    "RelationshipResolver",
    "Vocabularies",
    "load_catalog",
    "load_vocabularies",
    "validate_catalog",
]
