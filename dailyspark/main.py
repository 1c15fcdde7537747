import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Callable

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from starlette import status

from dailyspark.core.clock import get_clock
from dailyspark.core.db import SessionLocal, get_db, init_db
from dailyspark.core.errors import DailyQuoteError, SessionIdRequiredError
from dailyspark.core.logging import configure_logging
from dailyspark.core.settings import config_settings
from dailyspark.models.schemas.error import ErrorResponseModel
from dailyspark.models.schemas.quote import DailyQuoteRequestModel, DailyQuoteResponseModel
from dailyspark.seed import seed_quotes
from dailyspark.services.daily_quote_service import DailyQuoteService

logger = logging.getLogger(__name__)

CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(config_settings.LOG_LEVEL)
    if config_settings.CREATE_TABLES_ON_STARTUP:
        init_db()
    if config_settings.SEED_ON_STARTUP:
        db = SessionLocal()
        try:
            seed_quotes(db)
        finally:
            db.close()
    yield


app = FastAPI(
    title="Daily Spark",
    description="One motivational quote per session every 24 hours.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config_settings.CORS_ALLOW_ORIGINS,
    allow_methods=["POST", "OPTIONS"],
    allow_headers=CORS_ALLOW_HEADERS,
)


@app.exception_handler(DailyQuoteError)
async def daily_quote_error_handler(request: Request, exc: DailyQuoteError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    # A body that is not a JSON object can never carry a sessionId
    return await daily_quote_error_handler(request, SessionIdRequiredError())


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post(
    "/get-daily-quote",
    response_model=DailyQuoteResponseModel,
    status_code=status.HTTP_200_OK,
    summary="Get the session's quote of the day",
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponseModel},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponseModel},
    },
)
def get_daily_quote(
    request_data: DailyQuoteRequestModel,
    db: Session = Depends(get_db),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    """
    Returns the quote assigned to this session for the current 24-hour window.
    If the session has no active assignment, a new quote is chosen (avoiding the
    session's recent quotes) and persisted.
    """
    try:
        daily_quote_service = DailyQuoteService(db, clock=clock)
        return daily_quote_service.get_daily_quote(request_data.sessionId)

    except DailyQuoteError as e:
        if e.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("Error in get-daily-quote handler: %s", e.message)
        raise

    except Exception as e:
        logger.exception("Error in get-daily-quote handler")
        raise DailyQuoteError(str(e) or "Unknown error")


if __name__ == "__main__":
    uvicorn.run("dailyspark.main:app", host="0.0.0.0", port=8000, reload=True)
