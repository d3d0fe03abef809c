"""
Generator module for producing related mock data.

Handles dependency ordering, per-schema generation and FK consistency.
"""

from mockem.generator.generator import Generator
from mockem.generator.sampling import ValueSampler
from mockem.generator.schemas import GENERATORS, generate_schema

__all__ = ["GENERATORS", "Generator", "ValueSampler", "generate_schema"]
