"""Core models for request/response handling."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Upload:
    """One file uploaded through a multipart/form-data field."""

    field_name: str
    data: bytes = b""
    filename: str | None = None
    content_type: str | None = None

    @property
    def size(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        return f"Upload(field_name={self.field_name!r}, filename={self.filename!r}, size={self.size})"


UploadSet = tuple[Upload, ...]
