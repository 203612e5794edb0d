"""FastAPI application for the contract compliance engine.

Exposes the worker timeline, contract lifecycle and alert routers plus a ping
endpoint that checks database connectivity.
"""

import logging
import os

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from contract_engine.api.v1.endpoints.alerts import router as alerts_router
from contract_engine.api.v1.endpoints.contracts import router as contracts_router
from contract_engine.db.session import engine, init_db

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)


class PingResponse(BaseModel):
    """Response model for the ping endpoint.

    Attributes:
        message: Human readable message.
        database: Database connectivity status.
    """

    message: str
    database: str


app: FastAPI = FastAPI(title=os.getenv("PROJECT_NAME", "Contract Compliance Engine"))

app.include_router(contracts_router, prefix="/api/v1", tags=["Contracts"])
app.include_router(alerts_router, prefix="/api/v1", tags=["Alerts"])


@app.on_event("startup")
def _startup() -> None:
    init_db()


@app.get("/ping", response_model=PingResponse)
def ping() -> PingResponse:
    """Ping endpoint to validate connectivity between API and database.

    Raises:
        HTTPException: If the database is not reachable.
    """

    try:
        with engine.connect() as connection:
            value = connection.execute(text("SELECT 1")).scalar()
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=500,
            detail="Database connectivity error",
        ) from exc

    database_status: str = "ok" if value == 1 else "unknown"
    return PingResponse(message="pong", database=database_status)
