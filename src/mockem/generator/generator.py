"""
Generator component that drives a multi-schema generation request.

Handles:
- Request validation (row count, category, platform, schema membership)
- Dependency ordering via the relationship resolver
- Running schema generators in order, threading parent rows forward
- Tracking foreign keys that fell back to placeholder values
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from tqdm import tqdm

from mockem.catalog import RelationshipResolver, Vocabularies
from mockem.errors import ValidationError
from mockem.generator.sampling import ValueSampler
from mockem.generator.schemas import generate_schema
from mockem.models import (
    MAX_ROW_COUNT,
    MIN_ROW_COUNT,
    Catalog,
    CategoryDefinition,
    GenerationRequest,
    GenerationResult,
    Row,
)

logger = logging.getLogger(__name__)


class Generator:
    """
    Generates related rows for every schema in a request.

    The generator:
    1. Validates the request before any generation work
    2. Orders schemas so parents are generated before children
    3. Generates each schema, giving it read-only access to earlier schemas
    4. Records foreign keys whose parent schema was not requested
    """

    def __init__(
        self,
        catalog: Catalog,
        request: GenerationRequest,
        vocabularies: Vocabularies,
        now: Optional[datetime] = None,
        show_progress: bool = False,
    ):
        """
        Initialize generator.

        Args:
            catalog: Static category/relationship definitions
            request: What to generate
            vocabularies: Value lists for the schema generators
            now: Reference time for generated dates (defaults to current UTC time)
            show_progress: Show a progress bar over schemas
        """
        self.catalog = catalog
        self.request = request
        self.vocabularies = vocabularies
        self.now = now or datetime.now(timezone.utc)
        self.show_progress = show_progress
        self.resolver = RelationshipResolver(catalog)

    def validate(self) -> CategoryDefinition:
        """Reject invalid requests; returns the requested category definition."""
        row_count = self.request.row_count
        if isinstance(row_count, bool) or not isinstance(row_count, int):
            raise ValidationError("Row count must be an integer")
        if row_count < MIN_ROW_COUNT or row_count > MAX_ROW_COUNT:
            raise ValidationError(
                f"Row count must be between {MIN_ROW_COUNT} and {MAX_ROW_COUNT}"
            )

        category = self.catalog.get_category(self.request.category)

        if self.catalog.platforms and not self.catalog.has_platform(self.request.platform):
            raise ValidationError(f"Unknown platform: {self.request.platform}")

        return category

    def plan(self) -> List[str]:
        """Validate the request and return the generation order, generating nothing."""
        category = self.validate()
        return self.resolver.resolve(category.name, self.request.schemas)

    def generate(self) -> GenerationResult:
        """
        Generate all requested schemas.

        Returns:
            GenerationResult mapping schema name to its full row list
        """
        order = self.plan()
        category = self.catalog.get_category(self.request.category)

        logger.info(
            f"Generating {self.request.row_count} rows for {len(order)} schema(s) "
            f"in {category.name}"
        )
        logger.info(f"Generation order: {order}")

        sampler = ValueSampler.from_seed(self.vocabularies, self.request.seed, now=self.now)
        generated: Dict[str, Tuple[Row, ...]] = {}
        unresolved: Dict[str, List[str]] = {}

        for schema in tqdm(order, desc="Generating schemas", disable=not self.show_progress):
            parents = {
                fk.schema: generated[fk.schema]
                for fk in category.dependencies_of(schema)
                if fk.schema in generated
            }
            missing = [
                fk.field for fk in category.dependencies_of(schema)
                if fk.schema not in generated
            ]
            if missing:
                logger.warning(
                    f"{schema}: parent schema not requested, placeholder values "
                    f"used for {', '.join(missing)}"
                )
                unresolved[schema] = missing

            rows = generate_schema(schema, self.request.row_count, parents, sampler)
            generated[schema] = tuple(rows)
            logger.debug(f"Generated {len(rows)} rows for {schema}")

        # Present results in the caller's requested order
        data = {schema: list(generated[schema]) for schema in self._requested(order)}

        return GenerationResult(
            category=category.name,
            platform=self.request.platform,
            order=order,
            data=data,
            unresolved_references=unresolved,
            seed=self.request.seed,
            generated_at=self.now,
        )

    def _requested(self, order: List[str]) -> List[str]:
        seen: List[str] = []
        for schema in self.request.schemas:
            if schema in order and schema not in seen:
                seen.append(schema)
        return seen
