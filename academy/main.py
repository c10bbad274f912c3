from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from academy.api.routes.api import router as api_router
from academy.api.routes.auth import router as auth_router
from academy.api.routes.registration import router as registration_router
from academy.api.routes.upload import router as upload_router

from academy.core import config as settings
from academy.core.config import (
    PROJECT_NAME,
    VERSION,
    DESCRIPTION,
    DOCS_URL,
    API_PREFIX,
)
from academy.core.errors import (
    AcademyError,
    academy_error_handler,
    http_error_handler,
    unhandled_error_handler,
)
from academy.core.events import lifespan
from academy.core.middleware.debug_middleware import debug_middleware

# Paths that need an admin bearer token
PROTECTED_PATHS = (f"{API_PREFIX}/registrations",)


async def validation_error_handler(request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"error": "Invalid request", "details": jsonable_encoder(exc.errors())},
    )


def custom_openapi(app: FastAPI):
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )

    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "BearerAuth": {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT"
        }
    }

    for path, operations in openapi_schema["paths"].items():
        if path in PROTECTED_PATHS:
            for operation in operations.values():
                operation["security"] = [{"BearerAuth": []}]

    app.openapi_schema = openapi_schema
    return app.openapi_schema


def get_application() -> FastAPI:
    app = FastAPI(
        title=PROJECT_NAME,
        debug=settings.DEBUG,
        version=VERSION,
        description=DESCRIPTION,
        docs_url=DOCS_URL,
        lifespan=lifespan,
    )

    # Public health endpoint
    app.include_router(api_router, prefix=API_PREFIX)

    # Admin login
    app.include_router(auth_router, prefix=f"{API_PREFIX}/auth")

    # Enrollment endpoints
    app.include_router(registration_router, prefix=API_PREFIX)
    app.include_router(upload_router, prefix=API_PREFIX)

    # Every error body carries an "error" key
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(AcademyError, academy_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    if settings.DEBUG:
        app.middleware("http")(debug_middleware)

    app.openapi = lambda: custom_openapi(app)

    return app


app = get_application()
