import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.routers import calculate, health, holidays, rates

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Cafe Wage Engine API",
    description="DOLE-compliant shift pay calculation: overtime, holidays, night differential, rest days",
    version="1.0.0",
)

# CORS: open, the payroll UI is served from another origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(rates.router)
app.include_router(holidays.router)
app.include_router(calculate.router)
