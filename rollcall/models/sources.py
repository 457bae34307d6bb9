"""Input payloads: roster sources and session-capture images."""

import base64
import binascii
import mimetypes
from pathlib import Path

from pydantic import BaseModel, Field

from .enums import RosterSourceKind

SPREADSHEET_SUFFIXES = {".xlsx", ".xlsm"}
IMAGE_SUFFIXES = {".png", ".jpg", ".jpeg", ".webp", ".gif", ".bmp"}


class ImagePayload(BaseModel):
    """Raw image bytes plus enough metadata to send them to the oracle."""

    data: bytes = Field(..., description="Raw image bytes")
    mime_type: str = Field(default="image/png", description="MIME type of the image")
    label: str = Field(default="image", description="Human-readable label, usually the file name")

    @classmethod
    def from_path(cls, path: str | Path) -> "ImagePayload":
        path = Path(path)
        mime_type = mimetypes.guess_type(path.name)[0] or "image/png"
        return cls(data=path.read_bytes(), mime_type=mime_type, label=path.name)

    @classmethod
    def from_data_url(cls, value: str, label: str = "image") -> "ImagePayload":
        """Build a payload from a ``data:`` URL or a bare base64 string.

        Raises:
            ValueError: If the payload is not valid base64.
        """
        mime_type = "image/png"
        encoded = value
        if "," in value:
            header, encoded = value.split(",", 1)
            if header.startswith("data:"):
                mime_type = header[len("data:"):].split(";", 1)[0] or mime_type
        try:
            data = base64.b64decode(encoded, validate=True)
        except binascii.Error as e:
            raise ValueError(f"Invalid base64 image payload: {e}") from e
        return cls(data=data, mime_type=mime_type, label=label)

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")


class RosterSource(BaseModel):
    """The official roster, either a spreadsheet or a photographed list."""

    kind: RosterSourceKind
    data: bytes
    label: str = "roster"

    @classmethod
    def from_path(cls, path: str | Path) -> "RosterSource":
        """Load a roster file, inferring its kind from the suffix.

        Raises:
            ValueError: If the suffix is neither a spreadsheet nor an image.
        """
        path = Path(path)
        suffix = path.suffix.lower()
        if suffix in SPREADSHEET_SUFFIXES:
            kind = RosterSourceKind.SPREADSHEET
        elif suffix in IMAGE_SUFFIXES:
            kind = RosterSourceKind.IMAGE
        else:
            raise ValueError(f"Unsupported roster file type: {path.name}")
        return cls(kind=kind, data=path.read_bytes(), label=path.name)

    def as_image(self) -> ImagePayload:
        mime_type = mimetypes.guess_type(self.label)[0] or "image/png"
        return ImagePayload(data=self.data, mime_type=mime_type, label=self.label)
