"""HTTP surface — FastAPI routes translating requests into pipeline calls."""
import logging
import secrets
from collections.abc import Awaitable
from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException

from cropscan.config import Config
from cropscan.constants import (
    API_KEY_HEADER,
    MSG_ERR_INVALID_REQUEST,
    MSG_ERR_MISSING_URL,
    MSG_ERR_MULTIPLE_FILES,
    MSG_REQUEST_FAILED,
    ROUTE_ANALYZE_UPLOAD,
    ROUTE_ANALYZE_URL,
    ROUTE_HEALTH,
    UPLOAD_FIELD,
    URL_FIELD,
)
from cropscan.errors import (
    AnalysisError,
    AuthError,
    InternalError,
    MethodError,
    ValidationError,
)
from cropscan.models import AnalysisResult, RawUpload
from cropscan.pipeline import AnalysisPipeline

logger = logging.getLogger(__name__)


# ── helpers ───────────────────────────────────────────────────────────────────


def _error_response(exc: AnalysisError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def _respond(result: Awaitable[AnalysisResult]) -> dict[str, Any]:
    """Anything that is not an AnalysisError becomes a generic InternalError."""
    try:
        return (await result).to_dict()
    except AnalysisError:
        raise
    except Exception as exc:
        logger.exception(MSG_REQUEST_FAILED, exc)
        raise InternalError() from exc


def _to_raw_upload(values: list[Any]) -> RawUpload | None:
    """Exactly one file part is accepted; none at all means no file."""
    match [v for v in values if isinstance(v, UploadFile)]:
        case []:
            return None
        case [UploadFile() as upload]:
            return RawUpload(
                stream=upload.file,
                content_type=upload.content_type,
                filename=upload.filename,
                size=upload.size,
            )
        case _:
            raise ValidationError(MSG_ERR_MULTIPLE_FILES)


def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(AnalysisError)
    async def analysis_error_handler(request: Request, exc: AnalysisError):
        match exc.status_code:
            case code if code >= 500:
                logger.error(MSG_REQUEST_FAILED, exc.to_dict())
            case _:
                logger.warning(MSG_REQUEST_FAILED, exc.to_dict())
        return _error_response(exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        match exc.status_code:
            case 405:
                return _error_response(MethodError())
            case code:
                return JSONResponse(status_code=code, content={"error": str(exc.detail)})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return _error_response(ValidationError(MSG_ERR_INVALID_REQUEST))

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception(MSG_REQUEST_FAILED, exc)
        return _error_response(InternalError())


# ── app ───────────────────────────────────────────────────────────────────────


def create_app(config: Config, pipeline: AnalysisPipeline | None = None) -> FastAPI:
    app = FastAPI(title="cropscan", description="Crop image analysis via multimodal AI providers")
    pipeline = pipeline or AnalysisPipeline(config)
    register_exception_handlers(app)

    async def require_api_key(request: Request) -> None:
        match config.service_api_key:
            case str() as expected if expected:
                supplied = request.headers.get(API_KEY_HEADER, "")
                if not secrets.compare_digest(supplied.encode(), expected.encode()):
                    raise AuthError()
            case _:
                pass

    @app.get(ROUTE_HEALTH)
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post(ROUTE_ANALYZE_URL, dependencies=[Depends(require_api_key)])
    async def analyze_url(request: Request) -> dict[str, Any]:
        """JSON body {"imageUrl": "..."}; the provider fetches the image itself."""
        try:
            body = await request.json()
        except ValueError as exc:
            raise ValidationError(MSG_ERR_MISSING_URL) from exc
        image_url = body.get(URL_FIELD) if isinstance(body, dict) else None
        return await _respond(pipeline.analyze_url(image_url))

    @app.post(ROUTE_ANALYZE_UPLOAD, dependencies=[Depends(require_api_key)])
    async def analyze_image(request: Request) -> dict[str, Any]:
        """multipart/form-data with a single file under the "image" field."""
        async with request.form() as form:
            upload = _to_raw_upload(form.getlist(UPLOAD_FIELD))
            return await _respond(pipeline.analyze_upload(upload))

    return app
