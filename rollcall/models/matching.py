"""Wire models for the single matching request and its response."""

from pydantic import BaseModel, ConfigDict, Field

from .enums import MatchSensitivity


class MatchingRequest(BaseModel):
    """Both full name lists for one matching round-trip.

    Lists are already deduplicated and sorted by the adapter, so the same
    inputs always serialize to the same prompt.
    """

    roster: list[str] = Field(..., description="Official roster names")
    observations: list[str] = Field(..., description="Names observed in the session")
    sensitivity: MatchSensitivity = Field(default=MatchSensitivity.BALANCED)


class MatchedPair(BaseModel):
    """A roster name paired with the observed form it matched."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = Field(..., description="Roster form")
    original_name: str | None = Field(
        None, alias="originalName", description="Form seen in the session"
    )


class MatchingResponse(BaseModel):
    """Exactly three buckets; all of them are required."""

    model_config = ConfigDict(extra="ignore")

    present: list[MatchedPair]
    absent: list[str]
    unexpected: list[str]
