import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from userpurge.api import deps
from userpurge.api.routers.admin import router as admin_router
from userpurge.domain.usecase.errors import ErrorKind, OperationError
from userpurge.infra.lifecycle import on_shutdown, on_startup

log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    await on_startup(deps.settings)
    try:
        yield
    finally:
        await on_shutdown()


app = FastAPI(title="userpurge API", version="0.1.0", lifespan=lifespan)


@app.exception_handler(OperationError)
async def operation_error_handler(_: Request, exc: OperationError) -> JSONResponse:
    return JSONResponse(
        status_code=int(exc.kind.http_status),
        content={"error": exc.to_payload()},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    _: Request, exc: RequestValidationError
) -> JSONResponse:
    err = OperationError(ErrorKind.INVALID_ARGUMENT, "Request body is not valid JSON.")
    log.info("Rejected malformed request: %s", exc.errors())
    return JSONResponse(
        status_code=int(err.kind.http_status),
        content={"error": err.to_payload()},
    )


# Routers
app.include_router(admin_router)


@app.get("/healthz")
def healthz():
    return {"ok": True}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "userpurge.api.main:app", host="localhost", port=8000, reload=True, log_level="debug"
    )
