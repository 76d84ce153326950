"""
Chart Readiness API

Classifies uploaded tables, recommends chart types and reduces large
datasets for rendering. All analysis is deterministic.
"""

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from routers import charts, upload
from services.thresholds import DEFAULT_THRESHOLDS

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title="Chart Readiness API",
    description="Column typing, chart suggestions and deterministic sampling for tabular data.",
    version="0.1.0",
)

# CORS configuration for frontend
# Allow multiple ports for development (Vite increments port if 5173 is in use)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "http://localhost:5174",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:5174",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(charts.router)
app.include_router(upload.router)

logger.info(
    f"Thresholds: large={DEFAULT_THRESHOLDS.large_dataset}, "
    f"sampling={DEFAULT_THRESHOLDS.sampling_threshold}, "
    f"max_points={DEFAULT_THRESHOLDS.max_chart_points}"
)


@app.get("/")
async def root():
    """Service banner."""
    return {
        "name": "Chart Readiness API",
        "status": "healthy",
        "version": "0.1.0",
    }
