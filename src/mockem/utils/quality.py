"""
Integrity reporting for generated data.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

import pandas as pd

from mockem.models import Catalog, GenerationResult

logger = logging.getLogger(__name__)


class IntegrityReporter:
    """
    Checks a generation result against its category's relationship map.

    Reports include:
    - Row and column counts per schema
    - Id uniqueness and 1..n sequence
    - FK referential integrity for parents present in the batch
    - Placeholder FKs (parent not requested) listed as unchecked
    """

    def __init__(self, catalog: Catalog, result: GenerationResult):
        """
        Initialize integrity reporter.

        Args:
            catalog: Catalog holding the category's relationship map
            result: Generation result to inspect
        """
        self.category = catalog.get_category(result.category)
        self.result = result
        self.frames = result.to_frames()

        self.report: Dict[str, Any] = {
            "generated_at": result.generated_at.isoformat(),
            "category": result.category,
            "summary": {},
            "schemas": {},
            "referential_integrity": {},
        }

    def generate_report(self) -> Dict[str, Any]:
        """
        Generate integrity report.

        Returns:
            Report dictionary
        """
        logger.info("Generating integrity report...")

        for schema, df in self.frames.items():
            self.report["schemas"][schema] = self._analyze_schema(df)

        self.report["referential_integrity"] = self._check_referential_integrity()

        self.report["summary"] = {
            "total_schemas": len(self.frames),
            "total_rows": self.result.total_rows,
            "referential_integrity_score": self.report["referential_integrity"]["integrity_score"],
            "schemas_with_issues": [
                schema for schema, info in self.report["schemas"].items()
                if not (info["ids_unique"] and info["ids_sequential"])
            ],
        }

        return self.report

    def _analyze_schema(self, df: pd.DataFrame) -> Dict[str, Any]:
        ids = df["id"].tolist() if "id" in df.columns else []
        return {
            "row_count": len(df),
            "column_count": len(df.columns),
            "ids_unique": len(set(ids)) == len(ids),
            "ids_sequential": ids == list(range(1, len(ids) + 1)),
            "null_counts": {
                col: int(count) for col, count in df.isna().sum().items() if count
            },
        }

    def _check_referential_integrity(self) -> Dict[str, Any]:
        """Check every declared FK of every generated schema."""
        ri_report: Dict[str, Any] = {
            "total_relationships": 0,
            "valid_relationships": 0,
            "violations": [],
            "unchecked": [],
        }

        for child, child_df in self.frames.items():
            for fk in self.category.dependencies_of(child):
                if fk.schema not in self.frames:
                    ri_report["unchecked"].append({
                        "child_schema": child,
                        "child_field": fk.field,
                        "parent_schema": fk.schema,
                    })
                    continue

                ri_report["total_relationships"] += 1
                parent_ids = set(self.frames[fk.schema]["id"].dropna())
                child_values = set(child_df[fk.field].dropna())

                orphans = child_values - parent_ids
                if orphans:
                    ri_report["violations"].append({
                        "child_schema": child,
                        "child_field": fk.field,
                        "parent_schema": fk.schema,
                        "orphan_count": len(orphans),
                        "sample_orphans": sorted(orphans)[:5],
                    })
                else:
                    ri_report["valid_relationships"] += 1

        # Nothing checkable means nothing violated
        total = ri_report["total_relationships"]
        ri_report["integrity_score"] = (
            ri_report["valid_relationships"] / total if total else 1.0
        )

        return ri_report
