"""Before/after request hooks bound to a fixed set of endpoints."""

from robyn import Request, Response, Robyn

from app.core.logger import LogIcon, logger


class BaseMiddleware:
    """Override ``before`` and/or ``after``; only overridden hooks are installed."""

    endpoints: frozenset[str] = frozenset()

    def before(self, request: Request) -> Request | Response:
        return request

    def after(self, response: Response) -> Response:
        return response

    @property
    def hooks_before(self) -> bool:
        return type(self).before is not BaseMiddleware.before

    @property
    def hooks_after(self) -> bool:
        return type(self).after is not BaseMiddleware.after


def _install(app: Robyn, middleware: BaseMiddleware, endpoint: str) -> None:
    if middleware.hooks_before:

        @app.before_request(endpoint)
        async def before_request(request: Request) -> Request | Response:
            return middleware.before(request)

    if middleware.hooks_after:

        @app.after_request(endpoint)
        def after_request(response: Response) -> Response:
            return middleware.after(response)


def install_middlewares(app: Robyn, *middlewares: BaseMiddleware) -> list[BaseMiddleware]:
    """Attach each middleware's hooks to its endpoints. Call after the routers are included."""
    for middleware in middlewares:
        if not (middleware.hooks_before or middleware.hooks_after):
            raise TypeError(f"{type(middleware).__name__} overrides neither before nor after")
        for endpoint in sorted(middleware.endpoints):
            _install(app, middleware, endpoint)
        logger.info(
            f"Middleware installed: {type(middleware).__name__}",
            icon=LogIcon.ADAPTER,
            endpoints=sorted(middleware.endpoints),
        )
    return list(middlewares)
