from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from miacasa_site.api.templating import render
from miacasa_site.config import get_settings
from miacasa_site.db import ensure_schema, open_conn
from miacasa_site.images import FALLBACK_IMAGES
from miacasa_site.logging_setup import get_logger


logger = get_logger("app")


def health():
    return {"status": "ok"}


def placeholders():
    return {
        "placeholders": {
            category: list(urls) for category, urls in FALLBACK_IMAGES.items()
        }
    }


app = FastAPI(title="MiaCasa Investments")


if app:
    from miacasa_site.api.routes.inquiry import router as inquiry_router
    from miacasa_site.api.routes.pages import router as pages_router

    assert inquiry_router is not None
    assert pages_router is not None

    app.include_router(inquiry_router, prefix="/api")
    app.include_router(pages_router)

    @app.get("/health")
    def health_route():
        return health()

    @app.get("/api/placeholders")
    def placeholders_route():
        return placeholders()

    # Tables are created once per process, not per request.
    @app.on_event("startup")
    def _ensure_schema():
        db_path = get_settings().db_path
        with open_conn(db_path) as conn:
            ensure_schema(conn)
        logger.info("schema ready", extra={"db_path": db_path})

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        if request.url.path.startswith("/api") or exc.status_code != 404:
            return JSONResponse({"detail": exc.detail}, status_code=exc.status_code)
        logger.info("not found: %s", request.url.path)
        return render(
            request,
            "not_found.html",
            {"message": exc.detail if isinstance(exc.detail, str) else "Not Found"},
            status_code=404,
        )
