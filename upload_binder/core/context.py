"""Per-request upload context passed explicitly to binders."""

from collections.abc import Iterable
from io import BytesIO
from typing import Any

from multipart import MultipartError, MultipartParser, parse_options_header
from robyn import Request

from upload_binder.binding.errors import MissingContextError
from upload_binder.core.logger import LogIcon, logger
from upload_binder.models.core import Upload, UploadSet

UPLOADS_KEY = "__uploads"


class RequestUploadContext:
    """Uploads parsed for one in-flight request."""

    __slots__ = ("_args",)

    def __init__(self, uploads: Iterable[Upload] | None = None, args: dict[str, Any] | None = None) -> None:
        self._args: dict[str, Any] = dict(args or {})
        if uploads is not None:
            self._args[UPLOADS_KEY] = tuple(uploads)

    def __contains__(self, key: str) -> bool:
        return key in self._args

    def __repr__(self) -> str:
        return f"RequestUploadContext(uploads={self._args.get(UPLOADS_KEY)!r})"

    @property
    def uploads(self) -> UploadSet:
        """Uploads of the request, in the order they were parsed."""
        try:
            return self._args[UPLOADS_KEY]
        except KeyError:
            raise MissingContextError(f"Request context has no '{UPLOADS_KEY}' entry") from None

    def get(self, key: str, default: Any = None) -> Any:
        return self._args.get(key, default)

    @classmethod
    def from_request(cls, request: Request) -> "RequestUploadContext":
        """Build the context from the file parts of a multipart/form-data request body."""
        headers = getattr(request, "headers", None)
        content_type = headers.get("content-type") if headers is not None else None
        mimetype, options = parse_options_header(content_type or "")
        if mimetype != "multipart/form-data" or not options.get("boundary"):
            raise MissingContextError(f"Request is not multipart/form-data: {content_type!r}")

        body = getattr(request, "body", None) or b""
        body = body.encode("utf-8") if isinstance(body, str) else bytes(body)

        try:
            uploads = tuple(_read_uploads(body, options["boundary"]))
        except MultipartError as ex:
            raise MissingContextError(f"Unparseable multipart body: {ex}") from ex

        logger.debug("Request uploads collected", icon=LogIcon.UPLOAD, count=len(uploads))
        return cls(uploads=uploads)


def _read_uploads(body: bytes, boundary: str) -> Iterable[Upload]:
    # Parts without a filename are plain form fields, not uploads
    for part in MultipartParser(BytesIO(body), boundary, content_length=len(body)):
        try:
            if part.filename is not None:
                yield Upload(
                    field_name=part.name,
                    data=part.raw,
                    filename=part.filename,
                    content_type=part.content_type,
                )
        finally:
            part.close()
