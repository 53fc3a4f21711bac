"""robyn-upload-api - multipart file upload service powered by Robyn."""

from robyn import Robyn

from app.api.health import router as health_router
from app.api.uploads import router as uploads_router
from app.core.lifespan import attach_lifespan
from app.core.logger import LogIcon, logger
from app.core.settings import settings as st
from app.events.upload_dir import UploadDirectoryEvent
from app.middlewares.access_log import UploadAccessLogMiddleware
from app.middlewares.base import install_middlewares
from app.middlewares.files import FileUploadOpenAPIMiddleware

app = Robyn(__file__)

# Lifespan events
lifespan = attach_lifespan(app, UploadDirectoryEvent)

# Routers
app.include_router(health_router)
app.include_router(uploads_router)

# Middlewares
middlewares = install_middlewares(app, FileUploadOpenAPIMiddleware(), UploadAccessLogMiddleware())


def main() -> None:
    logger.info(f"Starting {st.API_NAME} on {st.api_url}", icon=LogIcon.START, upload_dir=str(st.UPLOAD_DIR))
    app.start(host=st.API_HOST, port=st.API_PORT)


if __name__ == "__main__":
    main()
