"""
Shared random-value helpers for the schema generators.

All randomness flows through an injected numpy Generator (and a Faker
instance seeded from it) so a seed reproduces a whole batch.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Sequence

import numpy as np
from faker import Faker

from mockem.catalog.loader import Vocabularies
from mockem.models import Row

# Placeholder foreign keys cycle through 1..FALLBACK_REFERENCE_RANGE
FALLBACK_REFERENCE_RANGE = 5

SECONDS_PER_DAY = 24 * 60 * 60


class ValueSampler:
    """Draws field values: vocabulary picks, numeric ranges, dates and references."""

    def __init__(
        self,
        vocabularies: Vocabularies,
        rng: np.random.Generator,
        faker: Optional[Faker] = None,
        now: Optional[datetime] = None,
    ):
        self.vocabularies = vocabularies
        self.rng = rng
        self.now = now or datetime.now(timezone.utc)

        if faker is None:
            faker = Faker()
            faker.seed_instance(int(rng.integers(0, 2**31 - 1)))
        self.faker = faker

    @classmethod
    def from_seed(
        cls,
        vocabularies: Vocabularies,
        seed: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> ValueSampler:
        """Create a sampler whose whole output is determined by `seed`."""
        return cls(vocabularies, np.random.default_rng(seed), now=now)

    def choice(self, vocabulary: str) -> str:
        """Uniform pick from a named vocabulary."""
        values = self.vocabularies[vocabulary]
        return values[int(self.rng.integers(0, len(values)))]

    def uniform(self, low: float, high: float, ndigits: int = 2) -> float:
        """Uniform float in [low, high), truncated to `ndigits` decimals."""
        scale = 10 ** ndigits
        value = math.floor(float(self.rng.uniform(low, high)) * scale) / scale
        return max(value, low)

    def integer(self, low: int, high: int) -> int:
        """Uniform integer in [low, high)."""
        return int(self.rng.integers(low, high))

    def digits(self, count: int) -> str:
        return "".join(str(d) for d in self.rng.integers(0, 10, size=count))

    def past_datetime(self, days: float) -> datetime:
        """Random timestamp within the last `days` days."""
        offset = float(self.rng.uniform(0, days * SECONDS_PER_DAY))
        return self.now - timedelta(seconds=offset)

    def future_datetime(self, days: float, start: Optional[datetime] = None) -> datetime:
        """Random timestamp within `days` days after `start` (default now)."""
        offset = float(self.rng.uniform(0, days * SECONDS_PER_DAY))
        return (start or self.now) + timedelta(seconds=offset)

    def email(self, first_name: str, last_name: str, index: int) -> str:
        local = f"{first_name}.{last_name}{index + 1}".lower().replace(" ", "")
        return f"{local}@{self.choice('email_domains')}"

    @staticmethod
    def reference(parents: Optional[Sequence[Row]], index: int) -> Any:
        """
        Foreign key for row `index`: parents cycled round-robin.

        With no parent rows the value is a placeholder in
        1..FALLBACK_REFERENCE_RANGE that need not match any row.
        """
        if parents:
            return parents[index % len(parents)]["id"]
        return (index % FALLBACK_REFERENCE_RANGE) + 1
