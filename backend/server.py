"""
FastAPI app exposing the subscription/ledger calculations to the host console.
Run: uvicorn server:app --app-dir backend
"""

from fastapi import FastAPI
import logging

import config
from routers import subscription_calculations

# Configure logging
logging.basicConfig(level=config.get_log_level(), format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

app = FastAPI(title="Gym Subscription Calculations")
app.include_router(subscription_calculations.router, prefix="/api")


@app.get("/api/health")
async def health():
    return {"status": "ok"}
