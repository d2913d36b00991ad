"""FastAPI application entry point."""

import logging

from fastapi import FastAPI

from leaf_gate.api.routes import router

logging.basicConfig(level=logging.INFO)

app = FastAPI(
    title="Leaf Gate API",
    description="Heuristic check that an uploaded photo shows a single plant leaf before model inference",
    version="0.1.0",
)

# Include API routes
app.include_router(router, prefix="/api/v1")


@app.get("/")
async def root():
    """Service information."""
    return {"service": "leaf-gate", "docs": "/docs", "validate": "/api/v1/validate"}
