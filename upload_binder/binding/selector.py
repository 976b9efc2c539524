"""Selection of a request's uploads by form field name."""

from collections.abc import Sequence

from beartype import beartype

from upload_binder.binding.errors import MissingContextError
from upload_binder.models.core import Upload, UploadSet


def _require(uploads: Sequence[Upload] | None) -> Sequence[Upload]:
    if uploads is None:
        raise MissingContextError("No upload set available for the current request")
    return uploads


@beartype
def select_uploads(field_name: str, uploads: Sequence[Upload] | None) -> UploadSet:
    """
    Return every upload carried by ``field_name``, in request order.

    Matching is exact and case-sensitive. An empty tuple means no field
    matched; ``None`` instead of a sequence means the request context was
    never populated and raises MissingContextError.
    """
    return tuple(upload for upload in _require(uploads) if upload.field_name == field_name)


@beartype
def select_upload(field_name: str, uploads: Sequence[Upload] | None) -> Upload | None:
    """Return the first upload carried by ``field_name``, or None."""
    return next((upload for upload in _require(uploads) if upload.field_name == field_name), None)
