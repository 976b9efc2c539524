"""upload-binder - multipart upload binding for Robyn handlers."""

from robyn import Robyn

from upload_binder.api.uploads import router as uploads_router
from upload_binder.core.logger import LogIcon, logger
from upload_binder.core.router import BINDERS
from upload_binder.core.settings import settings as st
from upload_binder.middlewares.base import MiddlewareHandler
from upload_binder.middlewares.files import FileUploadOpenAPIMiddleware

app = Robyn(__file__)

# Routers
app.include_router(uploads_router)

# Binders are fixed once every route is declared
BINDERS.freeze()

# Middlewares
middlewares = MiddlewareHandler(app)
middlewares.register(FileUploadOpenAPIMiddleware())


def main() -> None:
    logger.info("🚀 STARTING %s | HOST=%s | PORT=%s", st.API_NAME, st.API_HOST, st.API_PORT)
    logger.info("Binders ready", icon=LogIcon.ADAPTER, count=len(BINDERS))
    app.start(host=st.API_HOST, port=st.API_PORT)


if __name__ == "__main__":
    main()
