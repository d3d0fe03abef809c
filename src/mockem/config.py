"""
Service configuration.

Settings come from an optional YAML file (path passed explicitly or through
the MOCKEM_CONFIG environment variable); anything omitted keeps its default.

Example:

    quota:
      max_rows: 500
      max_exports: 5
      max_schemas: 10
    session_ttl_hours: 24
    cookie_secure: true
    cors_origins: ["http://localhost:5173"]
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from mockem.errors import ConfigError
from mockem.store import QuotaLimits

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "MOCKEM_CONFIG"


@dataclass
class ServiceConfig:
    """Settings for the HTTP service."""
    quota: QuotaLimits = field(default_factory=QuotaLimits)
    session_ttl_hours: float = 24
    cookie_name: str = "session"
    cookie_secure: bool = True
    cookie_samesite: str = "lax"
    cors_origins: List[str] = field(default_factory=lambda: ["http://localhost:5173"])
    catalog_path: Optional[Path] = None
    vocabularies_path: Optional[Path] = None
    log_level: str = "INFO"

    def __post_init__(self):
        if isinstance(self.catalog_path, str):
            self.catalog_path = Path(self.catalog_path)
        if isinstance(self.vocabularies_path, str):
            self.vocabularies_path = Path(self.vocabularies_path)
        if not isinstance(logging.getLevelName(str(self.log_level).upper()), int):
            raise ConfigError(f"Unknown log level: {self.log_level}")

    @property
    def session_ttl(self) -> timedelta:
        return timedelta(hours=self.session_ttl_hours)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ServiceConfig:
        """Create from dictionary; unknown keys are rejected."""
        data = dict(data or {})
        try:
            quota = QuotaLimits(**(data.pop("quota", None) or {}))
        except TypeError as e:
            raise ConfigError(f"Invalid quota settings: {e}") from e
        known = set(cls.__dataclass_fields__) - {"quota"}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        return cls(quota=quota, **data)


def load_config(path: Optional[Path] = None) -> ServiceConfig:
    """Load configuration from `path`, $MOCKEM_CONFIG, or defaults."""
    if path is None and os.environ.get(CONFIG_ENV_VAR):
        path = Path(os.environ[CONFIG_ENV_VAR])

    if path is None:
        return ServiceConfig()

    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}

    logger.info(f"Loaded configuration from {path}")
    return ServiceConfig.from_dict(data)
