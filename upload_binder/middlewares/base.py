"""Base middleware architecture for Robyn applications."""

from collections.abc import Callable, Iterable

from robyn import Request, Response, Robyn

from upload_binder.core.logger import LogIcon, logger


class BaseMiddleware:
    """Base class for middlewares with before/after hooks."""

    endpoints: frozenset[str] = frozenset()

    def __init__(self, endpoints: Iterable[str] | None = None) -> None:
        if endpoints:
            self.endpoints = frozenset(endpoints)

    def __init_subclass__(cls, **kwargs) -> None:
        super().__init_subclass__(**kwargs)
        # At least one of before/after must be implemented
        if cls.has_hook("before") or cls.has_hook("after"):
            return
        raise TypeError(f"{cls.__name__} must implement at least one of before/after")

    @classmethod
    def has_hook(cls, name: str) -> bool:
        """Check if a before/after hook was overridden."""
        return getattr(cls, name) is not getattr(BaseMiddleware, name)

    def before(self, request: Request) -> Request | Response:
        """Called before request handling. Return Request to continue or Response to short-circuit."""
        return request

    def after(self, response: Response) -> Response:
        """Called after request handling. Return modified Response."""
        return response


class MiddlewareHandler:
    """Manages middleware registration for a Robyn application."""

    def __init__(self, app: Robyn) -> None:
        self._app = app

    def register(self, middleware: BaseMiddleware) -> "MiddlewareHandler":
        """Register a middleware instance. Returns self for chaining."""
        self._apply_middleware(middleware)
        logger.info(f"Registered middleware: {middleware.__class__.__name__}", icon=LogIcon.ADAPTER)
        return self

    def _apply_middleware(self, middleware: BaseMiddleware) -> None:
        endpoints = middleware.endpoints or self._get_all_routes()
        for endpoint in endpoints:
            if middleware.has_hook("before"):
                self._register_before(endpoint, middleware.before)
            if middleware.has_hook("after"):
                self._register_after(endpoint, middleware.after)

    def _get_all_routes(self) -> frozenset[str]:
        routes = self._app.get_all_routes()
        return frozenset(route[1] for route in routes)

    def _register_before(self, endpoint: str, handler: Callable) -> None:
        @self._app.before_request(endpoint)
        async def before_wrapper(request: Request) -> Request | Response:
            return handler(request)

    def _register_after(self, endpoint: str, handler: Callable) -> None:
        @self._app.after_request(endpoint)
        def after_wrapper(response: Response) -> Response:
            return handler(response)
