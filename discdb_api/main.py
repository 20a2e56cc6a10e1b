import json
import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

# Use absolute package imports so uvicorn can resolve the module reliably.
from discdb_api.config import load_settings
from discdb_api.errors import DiscDBError
from discdb_api.routes.core import router as core_router

logger = logging.getLogger("discdb_api")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


class PrettyJSONResponse(JSONResponse):
    def render(self, content: Any) -> bytes:
        return json.dumps(content, ensure_ascii=False, indent=2).encode("utf-8")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


configure_logging(load_settings().log_level)

app = FastAPI(
    title="RipForge Community Disc Database API",
    default_response_class=PrettyJSONResponse,
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)
app.include_router(core_router)


@app.middleware("http")
async def cors_and_errors(request: Request, call_next):
    # Preflight never reaches the router.
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)
    try:
        response = await call_next(request)
    except Exception as exc:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        response = PrettyJSONResponse({"error": str(exc)}, status_code=500)
    response.headers.update(CORS_HEADERS)
    return response


@app.exception_handler(DiscDBError)
async def discdb_error(request: Request, exc: DiscDBError):
    if exc.status_code >= 500:
        logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    return PrettyJSONResponse(exc.to_dict(), status_code=exc.status_code)


@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    # Wrong method on a known path is reported the same as an unknown path.
    if exc.status_code in (404, 405):
        return PrettyJSONResponse({"error": "Not found"}, status_code=404)
    return PrettyJSONResponse({"error": str(exc.detail)}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def request_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    msg = errors[0]["msg"] if errors else "Invalid request"
    return PrettyJSONResponse({"error": msg}, status_code=400)
