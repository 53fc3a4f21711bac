"""Health check endpoint."""

from pydantic import BaseModel

from app.core.logger import LogIcon, logger
from app.core.router import Router
from app.core.settings import settings as st
from app.events.upload_dir import upload_dir_ready

router = Router(__file__, prefix="/")


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    service: str
    version: str
    upload_dir_ready: bool


@router.get("/health")
async def health_check() -> HealthResponse:
    ready = upload_dir_ready(st.UPLOAD_DIR)
    logger.info("Health check requested", icon=LogIcon.HEALTHCHECK, upload_dir_ready=ready)
    return HealthResponse(
        status="healthy" if ready else "degraded",
        service=st.API_NAME,
        version=st.API_VERSION,
        upload_dir_ready=ready,
    )
