"""
Relationship resolver: orders requested schemas so parents come first.
"""

from __future__ import annotations

import logging
from typing import Iterable, List

from mockem.errors import DependencyCycleError, InvalidSchemaError, ValidationError
from mockem.models import Catalog, CategoryDefinition

logger = logging.getLogger(__name__)


class RelationshipResolver:
    """
    Determines a generation order for a subset of a category's schemas.

    A schema is ready once every dependency it declares is either outside the
    requested subset or already placed. Each pass places all ready schemas in
    their requested order; a pass that places nothing means the remaining
    schemas depend on each other in a cycle.
    """

    def __init__(self, catalog: Catalog):
        self.catalog = catalog

    def resolve(self, category: str, schemas: Iterable[str]) -> List[str]:
        """
        Return the requested schemas in dependency order.

        Args:
            category: Category name (must exist in the catalog)
            schemas: Requested schema names, each belonging to the category

        Returns:
            Permutation of the (de-duplicated) requested schemas
        """
        definition = self.catalog.get_category(category)
        requested = self._validate(definition, schemas)
        return self.order(definition, requested)

    def _validate(self, definition: CategoryDefinition, schemas: Iterable[str]) -> List[str]:
        requested: List[str] = []
        for schema in schemas:
            if schema not in requested:
                requested.append(schema)

        if not requested:
            raise ValidationError("At least one schema must be selected")

        invalid = [s for s in requested if not definition.has_schema(s)]
        if invalid:
            raise InvalidSchemaError(definition.name, invalid)

        return requested

    @staticmethod
    def order(definition: CategoryDefinition, requested: List[str]) -> List[str]:
        """Order already-validated schemas; raises DependencyCycleError on a cycle."""
        wanted = set(requested)
        placed: List[str] = []
        remaining = list(requested)

        while remaining:
            placed_set = set(placed)
            ready = [
                schema for schema in remaining
                if all(
                    fk.schema not in wanted or fk.schema in placed_set
                    for fk in definition.dependencies_of(schema)
                    if fk.schema != schema
                )
            ]
            if not ready:
                raise DependencyCycleError(definition.name, remaining)

            placed.extend(ready)
            remaining = [s for s in remaining if s not in ready]

        logger.debug(f"Generation order for {definition.name}: {placed}")
        return placed
