"""
FastAPI application entry point for farm-insights.
"""
import logging
import os

from fastapi import FastAPI

from farm_insights.routers import agronomic

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)

app = FastAPI(title="Farm Insights", version="0.1.0")
app.include_router(agronomic.router)


@app.get("/health")
async def health():
    return {"status": "ok"}
