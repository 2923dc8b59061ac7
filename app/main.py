"""FastAPI application entry point.

Starts the Freelancer Tax API on port 8000.

Usage:
    uvicorn app.main:app --host 0.0.0.0 --port 8000 --reload
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.database import close_db, init_db
from app.routers import tax, transactions

# ── Logging ──────────────────────────────────────────────────────────────
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan (startup + shutdown) ────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Freelancer Tax API on port %s …", settings.APP_PORT)
    await init_db()
    yield
    await close_db()
    logger.info("Application shutdown complete.")


# ── Application factory ──────────────────────────────────────────────────

app = FastAPI(
    title="Freelancer Tax API",
    description=(
        "Progressive income-tax estimation for freelancers.  Computes "
        "taxable income, per-bracket tax, effective and marginal rates and "
        "the capped statutory-pension deduction, and summarises recorded "
        "income and expenses into draft filings."
    ),
    version="1.0.0",
    lifespan=lifespan,
)

# ── CORS ────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Request timing middleware ────────────────────────────────────────────

@app.middleware("http")
async def timing_middleware(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    response.headers["X-Response-Time-Ms"] = f"{elapsed_ms:.2f}"
    logger.debug(
        "%s %s → %s in %.2f ms",
        request.method, request.url.path, response.status_code, elapsed_ms,
    )
    return response


# ── Global exception handler ─────────────────────────────────────────────

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled exception on %s: %s", request.url.path, exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error. Please check the logs."},
    )


# ── Register routers ─────────────────────────────────────────────────────
app.include_router(tax.router)
app.include_router(transactions.router)


# ── Health check ──────────────────────────────────────────────────────────

@app.get("/health", tags=["Health"])
async def health_check():
    return {"status": "healthy", "port": settings.APP_PORT}


# ── Dev entry point ──────────────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.APP_HOST,
        port=settings.APP_PORT,
        reload=True,
    )
