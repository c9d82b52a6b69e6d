"""Pydantic models and dataclasses for request/response types."""
from __future__ import annotations
from dataclasses import dataclass

from pydantic import BaseModel, Field


class GenerateIn(BaseModel):
    description: str | None = None


class GenerateOut(BaseModel):
    proposal: str
    special_instructions_found: list[str] = Field(default_factory=list)


class ErrorOut(BaseModel):
    error: str


@dataclass
class UsageCounter:
    """Generations made on ``date_stamp`` (ISO date) in this browser/profile."""
    count: int
    date_stamp: str

    def to_record(self) -> dict[str, object]:
        return {"count": self.count, "dateStamp": self.date_stamp}
