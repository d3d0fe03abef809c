"""
Exception hierarchy for mockem.

All errors raised by the generation core derive from MockemError so the HTTP
layer can map them to status codes in one place.
"""

from __future__ import annotations

from typing import Iterable, List, Optional


class MockemError(Exception):
    """Base exception for mockem failures."""

    code = "MOCKEM_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(MockemError):
    """Request rejected before any generation work began."""

    code = "INVALID_ARGUMENT"


class UnknownCategoryError(ValidationError):
    """Category is not one of the configured business domains."""

    def __init__(self, category: str):
        super().__init__(f"Unknown category: {category}")
        self.category = category


class InvalidSchemaError(ValidationError):
    """One or more schemas do not belong to the requested category."""

    def __init__(self, category: str, schemas: Iterable[str]):
        self.category = category
        self.schemas: List[str] = list(schemas)
        super().__init__(
            f"Invalid schema for category {category}: {', '.join(self.schemas)}"
        )


class UnknownSchemaError(ValidationError):
    """Schema name reached generator dispatch without being a known kind."""

    def __init__(self, schema: str):
        super().__init__(f"Unknown schema: {schema}")
        self.schema = schema


class QuotaExceededError(MockemError):
    """Session has used up part of its daily allowance."""

    code = "RESOURCE_EXHAUSTED"


class UnauthenticatedError(MockemError):
    """No usable session identifier on a request that needs one."""

    code = "UNAUTHENTICATED"

    def __init__(self, message: str = "Session required"):
        super().__init__(message)


class SessionExpiredError(UnauthenticatedError):
    """Session id is unknown or older than the session TTL."""

    def __init__(self, session_id: Optional[str] = None):
        super().__init__("Invalid or expired session")
        self.session_id = session_id


class ConfigError(MockemError):
    """Service configuration is missing or malformed."""

    code = "CONFIG_ERROR"


class CatalogError(ConfigError):
    """Static catalog or vocabulary definitions are malformed."""

    code = "CATALOG_ERROR"


class DependencyCycleError(CatalogError):
    """Relationship map contains a cycle among the requested schemas."""

    code = "DEPENDENCY_CYCLE"

    def __init__(self, category: str, schemas: Iterable[str]):
        self.category = category
        self.schemas: List[str] = list(schemas)
        super().__init__(
            f"Circular dependency in category {category} involving: "
            f"{', '.join(self.schemas)}"
        )
