"""File upload middleware for OpenAPI multipart/form-data patching."""

import orjson
from robyn import Response

from app.core.logger import LogIcon, logger
from app.core.router import FILE_UPLOAD_ENDPOINTS
from app.middlewares.base import BaseMiddleware
from app.models.core import MULTIPART_FORM_DATA

MULTIPART_REQUEST_BODY = {
    "content": {
        MULTIPART_FORM_DATA: {
            "schema": {
                "type": "object",
                "properties": {
                    "files": {
                        "type": "array",
                        "items": {"type": "string", "format": "binary"},
                        "description": "Files to upload; any field name is accepted",
                    }
                },
            }
        }
    },
    "required": True,
}

RENAME_PARAMETER = {
    "name": "rename",
    "in": "query",
    "required": False,
    "schema": {"type": "boolean"},
    "description": "Store files under random names that keep the original extension",
}


def patch_openapi_spec(spec: dict, endpoints: set[str]) -> dict:
    """Document multipart endpoints of an OpenAPI spec in place."""
    paths = spec.get("paths", {})

    for endpoint in endpoints:
        if endpoint not in paths:
            continue
        for operation in paths[endpoint].values():
            operation["requestBody"] = MULTIPART_REQUEST_BODY
            parameters = [p for p in operation.get("parameters", []) if p.get("name") != "rename"]
            operation["parameters"] = parameters + [RENAME_PARAMETER]

    return spec


class FileUploadOpenAPIMiddleware(BaseMiddleware):
    """Patches OpenAPI responses to use multipart/form-data for file upload endpoints."""

    endpoints = frozenset(["/openapi.json"])

    def after(self, response: Response) -> Response:
        """Patch OpenAPI spec with multipart/form-data for file upload endpoints."""
        if not FILE_UPLOAD_ENDPOINTS:
            return response

        try:
            spec = orjson.loads(response.description)
        except orjson.JSONDecodeError:
            logger.warning("OpenAPI response is not JSON, skipping patch", icon=LogIcon.WARNING)
            return response

        response.description = orjson.dumps(patch_openapi_spec(spec, FILE_UPLOAD_ENDPOINTS)).decode()
        return response
