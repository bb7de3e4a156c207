"""Bazaar API service entrypoint."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from services.api.app.db.init_db import init_db
from services.api.app.routers.checkout import router as checkout_router
from services.api.app.routers.orders import router as orders_router
from services.api.app.services.checkout import format_validation_errors
from services.api.app.utils.logging import configure_logging

app = FastAPI(title="Bazaar API")

app.include_router(checkout_router)
app.include_router(orders_router)


@app.exception_handler(RequestValidationError)
async def _request_validation_error(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=400, content={"message": format_validation_errors(exc.errors())}
    )


@app.on_event("startup")
def _startup() -> None:
    configure_logging()
    init_db()


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}
