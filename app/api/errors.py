# app/api/errors.py
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.domain.errors import CollaboratorUnavailable, DomainError, ErrorKind
from app.utils.logging import get_logger

logger = get_logger(__name__)

STATUS_CODES = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.UNAVAILABLE: 409,
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.INVALID_STATE: 409,
    ErrorKind.INVALID_TRANSITION: 409,
    ErrorKind.UNAUTHORIZED: 403,
}


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = 503 if isinstance(exc, CollaboratorUnavailable) else STATUS_CODES[exc.kind]
    logger.info(f"{request.method} {request.url.path} -> {status_code} {exc.kind.value}: {exc.message}")
    return JSONResponse(status_code=status_code, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    detail = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return JSONResponse(
        status_code=400,
        content={"error": ErrorKind.INVALID_INPUT.value, "detail": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
