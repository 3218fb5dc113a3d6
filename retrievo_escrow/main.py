import logging
import os
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

from retrievo_escrow.db.db import create_db_and_tables
from retrievo_escrow.routers import escrow, events, items, profile
from retrievo_escrow.utils.errors import InvalidInput, LedgerError

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_db_and_tables()
    yield


app = FastAPI(lifespan=lifespan)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "http://localhost:3000").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError):
    logger.info("%s %s aborted: %s (%s)", request.method, request.url.path, exc.kind, exc.detail)

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error": exc.kind},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Malformed bodies and params abort as invalid input
    return await ledger_error_handler(request, InvalidInput(jsonable_encoder(exc.errors())))


# Register routers
app.include_router(items.router, prefix="/items", tags=["Items"])
app.include_router(profile.router, prefix="/profile", tags=["Profile"])
app.include_router(escrow.router, prefix="/escrow", tags=["Escrow"])
app.include_router(events.router, prefix="/events", tags=["Events"])


@app.get("/")
def root():
    return {"status": "ok"}
