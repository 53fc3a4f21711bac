"""Access logging for upload endpoints."""

from robyn import Request, Response

from app.core.logger import LogIcon, logger
from app.core.router import FILE_UPLOAD_ENDPOINTS
from app.middlewares.base import BaseMiddleware


class UploadAccessLogMiddleware(BaseMiddleware):
    """Logs every request hitting a multipart upload endpoint and the status it got."""

    @property
    def endpoints(self) -> frozenset[str]:
        return frozenset(FILE_UPLOAD_ENDPOINTS)

    def before(self, request: Request) -> Request:
        headers = request.headers
        logger.info(
            "Upload request received",
            icon=LogIcon.UPLOAD,
            method=request.method,
            content_type=headers.get("content-type"),
            content_length=headers.get("content-length"),
        )
        return request

    def after(self, response: Response) -> Response:
        status_code = response.status_code
        if status_code >= 500:
            logger.error("Upload response sent", icon=LogIcon.ERROR, status_code=status_code)
        elif status_code >= 400:
            logger.warning("Upload response sent", icon=LogIcon.WARNING, status_code=status_code)
        else:
            logger.info("Upload response sent", icon=LogIcon.SUCCESS, status_code=status_code)
        return response
