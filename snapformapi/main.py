import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic.alias_generators import to_camel
from starlette.exceptions import HTTPException as StarletteHTTPException
from snapformapi.config import config
from snapformapi.database import database
from snapformapi.errors import APIError
from snapformapi.logging_conf import configure_logging
from snapformapi.routers.form import router as form_router
from snapformapi.routers.public_form import router as public_form_router
from snapformapi.routers.theme import router as theme_router
from snapformapi.routers.user import profile_router, router as user_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    # connect database
    await database.connect()
    logger.info("Database connected")
    yield
    # disconnect database
    await database.disconnect()

app = FastAPI(
    title="SnapForm API",
    description="Form builder: design, publish and collect responses",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(APIError)
async def api_error_handler(request: Request, exc: APIError):
    logger.info(f"{request.method} {request.url.path} rejected: {exc.error}")
    content = {"error": exc.error}
    content.update({to_camel(key): value for key, value in exc.extra.items()})
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = jsonable_encoder(exc.errors(), custom_encoder={Exception: str})
    logger.debug(f"{request.method} {request.url.path} invalid: {errors}")
    return JSONResponse(status_code=400, content={"error": "Invalid request", "details": errors})


app.include_router(user_router, prefix="/api/auth", tags=["Auth"])
app.include_router(profile_router, prefix="/api/profile", tags=["Profile"])
app.include_router(form_router, prefix="/api/forms", tags=["Form"])
app.include_router(public_form_router, prefix="/api/public-forms", tags=["Public Form"])
app.include_router(theme_router, prefix="/api/themes", tags=["Theme"])
