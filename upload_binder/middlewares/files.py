"""Upload middleware for OpenAPI multipart/form-data patching."""

import orjson
from robyn import Response

from upload_binder.core.logger import LogIcon, logger
from upload_binder.core.router import FILE_UPLOAD_ENDPOINTS
from upload_binder.middlewares.base import BaseMiddleware

BINARY_SCHEMA = {"type": "string", "format": "binary"}


def upload_request_body(fields: dict[str, bool]) -> dict:
    """Build an optional multipart/form-data requestBody with one property per bound field.

    Absent fields bind to an empty tuple or None, so the body is never required.
    """
    properties = {
        name: {"type": "array", "items": BINARY_SCHEMA, "description": f"Files sent as '{name}'"}
        if is_array
        else {**BINARY_SCHEMA, "description": f"File sent as '{name}'"}
        for name, is_array in fields.items()
    }
    return {
        "content": {
            "multipart/form-data": {
                "schema": {"type": "object", "properties": properties},
            }
        },
        "required": False,
    }


def patch_openapi_spec(spec: dict, endpoints: dict[str, dict[str, bool]]) -> dict:
    """Replace the requestBody of every upload endpoint present in the spec."""
    paths = spec.get("paths", {})
    for endpoint, fields in endpoints.items():
        for operation in paths.get(endpoint, {}).values():
            operation["requestBody"] = upload_request_body(fields)
    return spec


class FileUploadOpenAPIMiddleware(BaseMiddleware):
    """Patches OpenAPI responses to use multipart/form-data for upload endpoints."""

    endpoints = frozenset(["/openapi.json"])

    def after(self, response: Response) -> Response:
        """Patch OpenAPI spec with multipart/form-data for upload endpoints."""
        if not FILE_UPLOAD_ENDPOINTS:
            return response

        try:
            spec = orjson.loads(response.description)
        except orjson.JSONDecodeError as ex:
            logger.warning("OpenAPI response is not valid JSON, left unpatched", icon=LogIcon.WARNING, error=str(ex))
            return response

        response.description = orjson.dumps(patch_openapi_spec(spec, FILE_UPLOAD_ENDPOINTS)).decode()
        return response
