"""
AlmondSense Admin API
Back office behind the dashboard: admin login and triage of form
submissions and registered user profiles.

Run with:
    uvicorn app.main:app

The public send-email function is a separate app (app.send_email).
"""

import logging
import os
from typing import Dict, List

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from app.db import DASHBOARD_TABLES, supabase_admin
from app.routers import admin_auth, profiles, submissions

# Configure logging to output to console
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)

API_TITLE = "AlmondSense Admin API"
API_VERSION = "0.1.0"

# Vite dev server ports used by the dashboard
DASHBOARD_PORTS = ("8080", "5173")


def get_cors_origins() -> List[str]:
    """
    Allowed dashboard origins, in order, without duplicates.

    - the dev server ports on localhost
    - the same ports on HOST_IP, when set (dashboard opened from another
      device on the LAN)
    - CORS_ORIGINS, comma-separated, e.g.
        CORS_ORIGINS=https://almondsense.id,https://admin.almondsense.id
    """
    hosts = ["localhost"]
    host_ip = os.getenv("HOST_IP", "").strip()
    if host_ip:
        hosts.append(host_ip)

    candidates = [f"http://{host}:{port}" for host in hosts for port in DASHBOARD_PORTS]
    candidates += [o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",")]

    origins: List[str] = []
    for origin in candidates:
        if origin and origin not in origins:
            origins.append(origin)
    return origins


app = FastAPI(
    title=API_TITLE,
    description="Back office for reviewing lead-intake submissions and user profiles",
    version=API_VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(admin_auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(submissions.router, prefix="/api/submissions", tags=["submissions"])
app.include_router(profiles.router, prefix="/api/profiles", tags=["profiles"])


@app.on_event("startup")
async def log_startup() -> None:
    host_port = os.getenv("HOST_PORT", "8000")
    logger.info(f"{API_TITLE} listening on port {host_port}")
    logger.info(f"Allowed dashboard origins: {', '.join(get_cors_origins())}")
    if supabase_admin is None:
        logger.warning("SUPABASE_SERVICE_KEY is not set; dashboard endpoints will fail")


@app.get("/")
async def root():
    return {"message": API_TITLE, "version": API_VERSION}


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/health/db")
async def health_db():
    """
    One-row read from every table the dashboard uses.

    Returns 200 with per-table status when all are reachable, 503 naming the
    failing tables otherwise.
    """
    if supabase_admin is None:
        raise HTTPException(
            status_code=503,
            detail="Database client unavailable: SUPABASE_SERVICE_KEY is not configured",
        )

    tables: Dict[str, str] = {}
    for table in DASHBOARD_TABLES:
        try:
            supabase_admin.table(table).select("*").limit(1).execute()
            tables[table] = "reachable"
        except Exception as exc:
            logger.error(f"Database health check failed for {table}: {exc}")
            tables[table] = f"error: {exc}"

    failing = [name for name, state in tables.items() if state != "reachable"]
    if failing:
        raise HTTPException(
            status_code=503,
            detail=f"Database connection failed for: {', '.join(failing)}",
        )

    return {"status": "ok", "database": "reachable", "tables": tables}
