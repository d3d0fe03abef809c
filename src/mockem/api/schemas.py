"""Request bodies for the HTTP API (camelCase on the wire)."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from mockem.models import DEFAULT_PLATFORM, GenerationRequest


class GenerateBody(BaseModel):
    """Body shared by /generate and /export."""

    model_config = ConfigDict(populate_by_name=True)

    category: str
    platform: str = DEFAULT_PLATFORM
    schemas: List[str] = Field(default_factory=list)
    row_count: StrictInt = Field(alias="rowCount")
    seed: Optional[int] = None

    def to_request(self) -> GenerationRequest:
        return GenerationRequest(
            category=self.category,
            schemas=self.schemas,
            row_count=self.row_count,
            platform=self.platform,
            seed=self.seed,
        )


class WaitlistBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str
    company: Optional[str] = None
    use_case: Optional[str] = Field(default=None, alias="useCase")
