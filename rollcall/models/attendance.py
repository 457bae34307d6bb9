"""Models for attendees and their three-way classification."""

from pydantic import BaseModel, Field

from .enums import AttendanceStatus


class Attendee(BaseModel):
    """One person in exactly one status bucket."""

    name: str = Field(..., min_length=1, description="Normalized name (roster form when matched)")
    status: AttendanceStatus = Field(..., description="Bucket this attendee belongs to")
    original_name: str | None = Field(
        None, description="Form observed in the session, kept to audit a match"
    )

    def matches(self, term: str) -> bool:
        """Case-insensitive substring match over name or original name."""
        needle = term.casefold()
        if needle in self.name.casefold():
            return True
        return bool(self.original_name) and needle in self.original_name.casefold()


class Classification(BaseModel):
    """Present, absent and unexpected buckets."""

    present: list[Attendee] = Field(default_factory=list)
    absent: list[Attendee] = Field(default_factory=list)
    unexpected: list[Attendee] = Field(default_factory=list)

    def bucket(self, status: AttendanceStatus) -> list[Attendee]:
        """Return the bucket list for a status (the live list, not a copy)."""
        if status == AttendanceStatus.PRESENT:
            return self.present
        if status == AttendanceStatus.ABSENT:
            return self.absent
        return self.unexpected

    def all_attendees(self) -> list[Attendee]:
        return [*self.present, *self.absent, *self.unexpected]

    def names(self, status: AttendanceStatus | None = None) -> list[str]:
        """Names in one bucket, or in all buckets when status is None."""
        attendees = self.bucket(status) if status else self.all_attendees()
        return [a.name for a in attendees]

    def counts(self) -> dict[AttendanceStatus, int]:
        return {status: len(self.bucket(status)) for status in AttendanceStatus}

    @property
    def total(self) -> int:
        return len(self.present) + len(self.absent) + len(self.unexpected)
