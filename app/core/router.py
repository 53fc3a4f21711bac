"""Robyn SubRouter that hands multipart bodies to upload handlers."""

import inspect
from collections.abc import Callable
from functools import wraps
from typing import Any

import orjson
from pydantic import BaseModel
from robyn import Request, Response, SubRouter, status_codes

from app.models.core import MULTIPART_FORM_DATA, MultipartBody

# Full paths of every route taking a MultipartBody, read by the OpenAPI and access log middlewares.
FILE_UPLOAD_ENDPOINTS: set[str] = set()

JSON_HEADERS = {"content-type": "application/json"}


def multipart_params(handler: Callable[..., Any]) -> set[str]:
    """Names of the handler parameters annotated with ``MultipartBody``."""
    return {
        name
        for name, param in inspect.signature(handler).parameters.items()
        if param.annotation is MultipartBody
    }


def inject_multipart(params: set[str], request: Request, kwargs: dict[str, Any]) -> Response | None:
    """Fill ``params`` with the request body, or return a 415 when it is not multipart."""
    if not params:
        return None

    form = MultipartBody.from_request(request)
    if not form.is_multipart():
        return Response(
            status_code=status_codes.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            headers=JSON_HEADERS,
            description=orjson.dumps(
                {"error": "unsupported_media_type", "expected": MULTIPART_FORM_DATA, "received": form.mimetype}
            ).decode(),
        )

    for name in params:
        kwargs[name] = form
    return None


def to_response(result: BaseModel | Response) -> Response:
    """Serialize a pydantic result as JSON; Robyn responses pass through."""
    if isinstance(result, Response):
        return result
    if isinstance(result, BaseModel):
        return Response(status_code=status_codes.HTTP_200_OK, headers=JSON_HEADERS, description=result.model_dump_json())
    raise TypeError(f"Handler returned {type(result).__name__}, expected a pydantic model or Response")


class Router(SubRouter):
    """SubRouter whose GET and POST handlers receive multipart bodies and return pydantic models."""

    def __init__(self, file_object: str, prefix: str = "", **kwargs: Any) -> None:
        super().__init__(file_object, prefix=prefix, **kwargs)
        self.route_prefix = prefix.rstrip("/")

    def get(self, endpoint: str, *args: Any, **kwargs: Any) -> Callable:
        return self._route(super().get, endpoint, *args, **kwargs)

    def post(self, endpoint: str, *args: Any, **kwargs: Any) -> Callable:
        return self._route(super().post, endpoint, *args, **kwargs)

    def _route(self, register: Callable[..., Callable], endpoint: str, *args: Any, **kwargs: Any) -> Callable:
        add_route = register(endpoint, *args, **kwargs)

        def decorator(handler: Callable[..., Any]) -> Callable:
            form_params = multipart_params(handler)
            wants_request = "request" in inspect.signature(handler).parameters
            if form_params:
                FILE_UPLOAD_ENDPOINTS.add(f"{self.route_prefix}{endpoint}")

            @wraps(handler)
            async def endpoint_handler(request: Request) -> Response:
                handler_kwargs: dict[str, Any] = {}
                if rejection := inject_multipart(form_params, request, handler_kwargs):
                    return rejection
                if wants_request:
                    handler_kwargs["request"] = request
                return to_response(await handler(**handler_kwargs))

            # Robyn injects by signature, so only the request is advertised.
            endpoint_handler.__signature__ = inspect.Signature(
                [inspect.Parameter("request", inspect.Parameter.POSITIONAL_OR_KEYWORD, annotation=Request)]
            )
            return add_route(endpoint_handler)

        return decorator
