import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from core import settings
from core.db import Database, StoreError
from expenses import router as expenses_router
from expenses.repository import ExpenseNotFoundError, ExpenseRepository
from expenses.schemas import ExpenseValidationError

settings.configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Open the DB pool once per process and make sure the table exists.
    db = await Database.connect()
    try:
        await ExpenseRepository(db).create_table()
    except StoreError:
        await db.close()
        raise
    app.state.db = db
    try:
        yield
    finally:
        app.state.db = None
        await db.close()


app = FastAPI(lifespan=lifespan)

app.include_router(expenses_router.router, tags=["expenses"])


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.exception_handler(ExpenseValidationError)
async def validation_error_handler(_: Request, exc: ExpenseValidationError) -> JSONResponse:
    return _error(400, str(exc))


@app.exception_handler(ExpenseNotFoundError)
async def not_found_handler(_: Request, exc: ExpenseNotFoundError) -> JSONResponse:
    return _error(404, str(exc))


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    logger.error(
        "store_error method=%s path=%s error=%s",
        request.method,
        request.url.path,
        exc,
        exc_info=exc,
    )
    return _error(500, str(exc))


@app.exception_handler(HTTPException)
async def http_error_handler(_: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.port())
