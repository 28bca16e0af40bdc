# api_server/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.generator import build_server_generator
from .routers import random_bytes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app_instance: FastAPI):
    # Startup: one generator for the whole process, built before any request is served.
    # Build errors propagate so the server refuses to start with a weak or broken DRBG.
    logger.info("API Startup: Building SP 800-90A generator...")
    app_instance.state.drbg = build_server_generator()
    logger.info("API Startup: Generator %s ready.", app_instance.state.drbg.algorithm)

    yield

    app_instance.state.drbg = None
    logger.info("API Shutdown: Generator released.")


app = FastAPI(
    title="SP 800-90A DRBG API",
    description="API serving random bytes from NIST SP 800-90A deterministic random bit generators.",
    version="0.1.0",
    lifespan=lifespan
)

origins = [
    "http://localhost",
    "http://localhost:8080",
    "http://127.0.0.1",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(random_bytes.router, prefix="/api/v1")


@app.get("/", tags=["Root"])
async def read_root():
    return {"message": "SP 800-90A DRBG API. See /docs for the endpoints."}

# To run this API server from the project root:
#   SERVER_API_KEY=... SP800_API_MECHANISM=hash uvicorn api_server.main:app
