from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.httpsredirect import HTTPSRedirectMiddleware
from starlette.responses import JSONResponse

from roster.api.main import api_router
from roster.core.errors import RosterError, TransientError, ValidationError
from roster.core.logging import configure_logging, get_logger
from roster.core.settings import Env, settings
from roster.db.session import init_db
from roster.middlewares.telemetry import RequestContextMiddleware
from roster.services.student_query import describe_validation_errors
from roster.version import APP_VERSION, BUILD_TIME_UTC, GIT_SHA

configure_logging(json=settings.LOG_JSON, level=settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    # conexão única, reutilizada por todos os requests
    init_db(create_schema=settings.CREATE_SCHEMA_ON_STARTUP)
    get_logger().info("app.started", env=settings.APP_ENV.value, version=APP_VERSION)
    yield


app = FastAPI(debug=settings.DEBUG, title="Student Roster", lifespan=lifespan)

# --- Middlewares de contexto/log
app.add_middleware(RequestContextMiddleware)

# --- CORS
allowed_origins = []
for host in settings.ALLOWED_HOSTS.split(","):
    _host = host.strip()
    if not _host:
        continue
    # aceita tanto com quanto sem protocolo
    if _host.startswith("http"):
        allowed_origins.append(_host)
    else:
        allowed_origins.append(f"http://{_host}")
        allowed_origins.append(f"https://{_host}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=(allowed_origins or ["*"]) if settings.DEBUG else allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- HTTPS only em prod
if settings.APP_ENV == Env.PROD:
    app.add_middleware(HTTPSRedirectMiddleware)


@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)
    if settings.APP_ENV == Env.PROD:
        response.headers["Strict-Transport-Security"] = (
            "max-age=15552000; includeSubDomains"
        )
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "no-referrer"
    return response


# --- Erros: sempre {message, kind}
@app.exception_handler(RosterError)
async def roster_error_handler(_: Request, exc: RosterError):
    return JSONResponse(exc.to_body(), status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(_: Request, exc: RequestValidationError):
    err = ValidationError(describe_validation_errors(exc.errors()))
    return JSONResponse(err.to_body(), status_code=err.status_code)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(_: Request, exc: StarletteHTTPException):
    kind = "not_found" if exc.status_code == 404 else "validation"
    if exc.status_code >= 500:
        kind = "transient"
    return JSONResponse(
        {"message": str(exc.detail), "kind": kind}, status_code=exc.status_code
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(_: Request, exc: Exception):
    get_logger().error("request.unhandled", error=repr(exc))
    err = TransientError()
    return JSONResponse(err.to_body(), status_code=err.status_code)


app.include_router(api_router)


# --- Endpoints
@app.get("/healthz", tags=["ops"])
def healthz():
    get_logger().info("health.check")
    return {"status": "ok", "env": settings.APP_ENV, "version": APP_VERSION}


@app.get("/version", tags=["ops"])
def version():
    return {
        "version": APP_VERSION,
        "git_sha": GIT_SHA,
        "build_time_utc": BUILD_TIME_UTC,
        "env": settings.APP_ENV,
        "debug": settings.DEBUG,
    }
