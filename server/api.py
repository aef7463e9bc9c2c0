"""FastAPI entrypoint for the transaction service HTTP endpoints.

GET /transactionservice/transaction/{transaction_id}
    {"amount": float, "type": str, "parent_id": int}, or {} when unknown.
PUT /transactionservice/transaction/{transaction_id}
    Body {"amount": float, "type": str, "parent_id": int (optional)}.
    {"status": "OK"} or HTTP 400 with the rejection code.
GET /transactionservice/types/{type}
    [int, int, ...]
GET /transactionservice/sum/{transaction_id}
    {"sum": float}, the amount of the transaction plus all of its descendants.

Amounts must be finite; `1e400`, `Infinity` and `NaN` are answered with 422.

The module-level `app` owns the process's transaction store and is the target
for `uvicorn server.api:app`; `server.main` serves the same instance.
"""

from __future__ import annotations

import logging
import math
from typing import Annotated, Any

from fastapi import APIRouter, Depends, FastAPI, Path
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.requests import Request
from fastapi.responses import JSONResponse, PlainTextResponse

from backend.factory import build_transaction_service
from backend.services.transaction_service import TransactionService
from shared import config as _config
from shared.models import (
    INSERT_STATUS_REJECTED,
    InsertStatus,
    SumResult,
    ToolError,
    TransactionPayload,
)


logger = logging.getLogger(__name__)


_BANNER = "\n This is the REST API of the transaction service."

TransactionId = Annotated[int, Path(ge=0)]


def _json_safe_float(value: float) -> float | str:
    return value if math.isfinite(value) else str(value)


def get_transaction_service(request: Request) -> TransactionService:
    """Return the service bound to the running application."""

    return request.app.state.transaction_service


router = APIRouter(prefix="/transactionservice")


@router.get("", response_class=PlainTextResponse)
def banner() -> str:
    return _BANNER


@router.get("/transaction/{transaction_id}")
def get_transaction(
    transaction_id: TransactionId,
    service: TransactionService = Depends(get_transaction_service),
) -> dict[str, Any]:
    result = service.get_transaction(transaction_id)
    if isinstance(result, ToolError):
        return {}
    return result.model_dump()


@router.put("/transaction/{transaction_id}", response_model=InsertStatus, response_model_exclude_none=True)
def put_transaction(
    transaction_id: TransactionId,
    payload: TransactionPayload,
    service: TransactionService = Depends(get_transaction_service),
) -> InsertStatus | JSONResponse:
    result = service.insert_transaction(transaction_id, payload)
    if isinstance(result, ToolError):
        rejected = InsertStatus(status=INSERT_STATUS_REJECTED, code=result.code, message=result.message)
        return JSONResponse(status_code=400, content=rejected.model_dump(mode="json", exclude_none=True))
    return result


@router.get("/types/{transaction_type}")
def get_transaction_ids_for_type(
    transaction_type: str,
    service: TransactionService = Depends(get_transaction_service),
) -> list[int]:
    return service.transaction_ids_for_type(transaction_type)


@router.get("/sum/{transaction_id}", response_model=SumResult)
def get_transaction_sum(
    transaction_id: TransactionId,
    service: TransactionService = Depends(get_transaction_service),
) -> SumResult:
    return service.transaction_sum(transaction_id)


def create_app(transaction_service: TransactionService | None = None) -> FastAPI:
    """Build the HTTP application around one transaction service."""

    app = FastAPI(title="Transaction Service API")
    if transaction_service is None:
        transaction_service = build_transaction_service()
    app.state.transaction_service = transaction_service

    allow_origins = _config.cors_allow_origins()

    @app.middleware("http")
    async def log_http_requests(request: Request, call_next):
        """Log incoming requests, HTTP status codes and unexpected errors."""

        logger.info("http_request_received method=%s path=%s", request.method, request.url.path)
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "http_request_failed method=%s path=%s",
                request.method,
                request.url.path,
            )
            raise

        logger.info(
            "http_response_sent method=%s path=%s status_code=%s",
            request.method,
            request.url.path,
            response.status_code,
        )
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.info("cors_allow_origins=%s", allow_origins)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Return 422 with the validation errors, rendering rejected non-finite inputs as text."""

        logger.info(
            "http_request_invalid method=%s path=%s error_count=%s",
            request.method,
            request.url.path,
            len(exc.errors()),
        )
        detail = jsonable_encoder(exc.errors(), custom_encoder={float: _json_safe_float})
        return JSONResponse(status_code=422, content={"detail": detail})

    @app.exception_handler(Exception)
    async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
        """Return a JSON 500 response for unhandled exceptions."""

        logger.exception(
            "unhandled_exception method=%s path=%s exception_type=%s message=%s",
            request.method,
            request.url.path,
            type(exc).__name__,
            str(exc),
            exc_info=exc,
        )
        return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})

    @app.get("/health")
    def health() -> dict[str, object]:
        """Healthcheck endpoint."""

        return {"status": "ok", "transactions": app.state.transaction_service.transaction_count()}

    app.include_router(router)
    return app


app = create_app()
