"""Progress events and per-run results."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from .attendance import Classification


class ProgressEvent(BaseModel):
    """One step of an analysis run, in the order it happened."""

    stage: str = Field(..., description="roster | observation | matching | review")
    message: str
    current: int | None = Field(None, description="1-based position within the stage")
    total: int | None = Field(None, description="Number of steps in the stage")
    level: Literal["info", "warning"] = "info"
    timestamp: datetime = Field(default_factory=datetime.now)


class ImageExtraction(BaseModel):
    """Names read from one session-capture image."""

    index: int = Field(..., ge=1)
    label: str
    names: list[str] = Field(default_factory=list)
    error: str | None = Field(None, description="Set when extraction failed and degraded to empty")

    @property
    def failed(self) -> bool:
        return self.error is not None


class AnalysisResult(BaseModel):
    """Everything one run produced before human review."""

    roster_names: list[str]
    observed_names: list[str]
    classification: Classification
    images: list[ImageExtraction] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    duration_seconds: float = Field(default=0.0, ge=0)
