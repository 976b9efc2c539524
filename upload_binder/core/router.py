"""Router that binds upload parameters from the request and serialises handler results."""

import inspect
from collections.abc import Callable
from functools import wraps
from typing import Any, NamedTuple, get_origin

import orjson
from pydantic import BaseModel
from robyn import Request, Response, SubRouter, status_codes
from robyn.robyn import HttpMethod

from upload_binder.binding.errors import MissingContextError
from upload_binder.binding.registry import Binder, BinderRegistry, default_registry
from upload_binder.core.context import RequestUploadContext
from upload_binder.core.logger import LogIcon, logger

# endpoint path -> form field -> True when the field binds an array of uploads
FILE_UPLOAD_ENDPOINTS: dict[str, dict[str, bool]] = {}

BINDERS: BinderRegistry = default_registry()

HTTP_METHODS = (
    HttpMethod.GET,
    HttpMethod.POST,
    HttpMethod.PUT,
    HttpMethod.DELETE,
    HttpMethod.PATCH,
)


class UploadParam(NamedTuple):
    """Binder resolved for one upload-typed handler parameter."""

    binder: Binder
    is_array: bool


def parse_endpoint_signature(sig: inspect.Signature, registry: BinderRegistry | None = None) -> dict[str, UploadParam]:
    """Resolve a binder for every parameter whose annotation is registered."""
    registry = registry if registry is not None else BINDERS
    upload_params: dict[str, UploadParam] = {}
    for name, param in sig.parameters.items():
        if binder := registry.resolve(param.annotation):
            upload_params[name] = UploadParam(binder, get_origin(param.annotation) in (list, tuple))
    return upload_params


def parse_request_uploads(
    upload_params: dict[str, UploadParam],
    request: Request,
    kwargs: dict[str, Any],
) -> None:
    """Bind each upload parameter to the request uploads sent under its name."""
    if not upload_params:
        return

    try:
        context = RequestUploadContext.from_request(request)
    except MissingContextError:
        logger.error("Upload binding outside a multipart request", icon=LogIcon.ERROR, fields=list(upload_params))
        raise

    for param_name, upload_param in upload_params.items():
        kwargs[param_name] = upload_param.binder(param_name, context.uploads)


def parse_response(result: Any) -> Response:
    """Convert handler result to Response."""
    match result:
        case Response():
            return result
        case BaseModel():
            description = result.model_dump_json()
        case dict() | list() | tuple():
            description = orjson.dumps(result).decode()
        case _:
            return Response(status_code=status_codes.HTTP_200_OK, headers={}, description=str(result))

    return Response(
        status_code=status_codes.HTTP_200_OK,
        headers={"content-type": "application/json"},
        description=description,
    )


def bind_handler(handler: Callable, upload_params: dict[str, UploadParam]) -> Callable:
    """Wrap a handler so Robyn injects the request and uploads are bound from it."""
    sig = inspect.signature(handler)
    has_request_param = "request" in sig.parameters

    @wraps(handler)
    async def wrapped_handler(request: Request, **h_kwargs):
        parse_request_uploads(upload_params, request, h_kwargs)
        if has_request_param:
            h_kwargs["request"] = request
        return parse_response(await handler(**h_kwargs))

    # Robyn injects by signature: request first, upload params hidden
    params = [inspect.Parameter("request", inspect.Parameter.POSITIONAL_OR_KEYWORD, annotation=Request)]
    params += [p for name, p in sig.parameters.items() if name != "request" and name not in upload_params]
    wrapped_handler.__signature__ = sig.replace(parameters=params)  # type: ignore[attr-defined]
    return wrapped_handler


class Router(SubRouter):
    """SubRouter resolving upload binders when routes are declared."""

    def __init__(self, *args, binders: BinderRegistry | None = None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._prefix = kwargs.get("prefix", "")
        self._binders = binders if binders is not None else BINDERS
        for method in HTTP_METHODS:
            method_name = str(method).split(".")[-1].lower()
            setattr(self, method_name, self._wrap_method(getattr(self, method_name)))

    @property
    def binders(self) -> BinderRegistry:
        return self._binders

    def _wrap_method(self, original_method: Callable) -> Callable:
        @wraps(original_method)
        def method_wrapper(*args, **kwargs) -> Callable:
            endpoint = args[0] if args else kwargs.get("endpoint", "")
            decorator = original_method(*args, **kwargs)

            def handler_decorator(handler: Callable) -> Callable:
                upload_params = parse_endpoint_signature(inspect.signature(handler), self._binders)
                if upload_params:
                    full_path = f"{self._prefix}{endpoint}".replace("//", "/")
                    FILE_UPLOAD_ENDPOINTS[full_path] = {name: p.is_array for name, p in upload_params.items()}
                return decorator(bind_handler(handler, upload_params))

            return handler_decorator

        return method_wrapper
