"""Unit code service - Main Application"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from unitcode import __version__
from unitcode.api.units import router as units_router, unit_code_error_handler
from unitcode.common.config import settings
from unitcode.common.exceptions import UnitCodeError

logging.basicConfig(level=settings.app.log_level)

app = FastAPI(
    title="Unit Code Service",
    description="Parse, canonicalize and generate textual unit expressions",
    version=__version__,
    debug=settings.app.debug
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(units_router)
app.add_exception_handler(UnitCodeError, unit_code_error_handler)

@app.get("/")
async def root():
    return {"message": "Unit Code Service", "status": "running"}

@app.get("/health")
async def health():
    return {"status": "healthy"}
