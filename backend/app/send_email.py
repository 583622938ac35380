"""
AlmondSense send-email function.
Standalone FastAPI application for transactional notification emails.

Run with:
    uvicorn app.send_email:app

It needs no Supabase credentials; only RESEND_API_KEY (and the optional
rate-limit / sender variables documented in the service modules).
"""

import logging

from dotenv import load_dotenv
from fastapi import FastAPI

load_dotenv()

from app.routers import notifications  # noqa: E402

# Configure logging to output to console
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

app = FastAPI(
    title="AlmondSense send-email",
    description="Contact, status-update and welcome notification emails",
    version="0.1.0",
)


@app.get("/health")
async def health():
    return {"status": "ok"}


# Catch-all OPTIONS/POST routes; registered last so /health stays reachable
app.include_router(notifications.router)
