"""
SES Event Transformer API
FastAPI application that flattens SES mail-receipt notifications.
"""

import logging
import os
import socket
from typing import List, Optional

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.routers import ses_events

load_dotenv()

# Configure logging to output to console
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)

API_VERSION = "0.1.0"


def _is_usable_lan_ip(ip: str) -> bool:
    """Return True if the IP is a usable LAN address (not loopback, not Docker internal)."""
    if ip.startswith("127."):
        return False
    # Docker bridge network
    if ip.startswith("172."):
        return False
    return True


def get_local_ip() -> Optional[str]:
    """
    Detect the host machine's local network IP address.

    ``HOST_IP`` wins when set (containers cannot see the host's LAN address);
    otherwise the hostname is resolved. Returns None when neither yields a
    usable address.
    """
    host_ip = os.getenv("HOST_IP", "").strip()
    if host_ip:
        return host_ip

    try:
        ip = socket.gethostbyname(socket.gethostname())
    except OSError:
        return None
    return ip if ip and _is_usable_lan_ip(ip) else None


app = FastAPI(
    title="SES Event Transformer",
    description="Flattens SES mail-receipt notifications for dashboards and log pipelines",
    version=API_VERSION,
)


def get_cors_origins() -> List[str]:
    """
    Build the list of allowed CORS origins.

    Always includes http://localhost:3000 and http://localhost:3001 (local
    dashboards). Additional origins are read from the CORS_ORIGINS environment
    variable as a comma-separated list, e.g.:
        CORS_ORIGINS=https://dashboard.example.com,https://logs.example.com

    Duplicates are removed while preserving order.
    """
    always_included = [
        "http://localhost:3000",
        "http://localhost:3001",
    ]

    extra_origins: List[str] = []
    cors_env = os.getenv("CORS_ORIGINS", "").strip()
    if cors_env:
        extra_origins = [o.strip() for o in cors_env.split(",") if o.strip()]

    return list(dict.fromkeys(always_included + extra_origins))


app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(ses_events.router, tags=["ses"])


@app.on_event("startup")
async def log_startup_urls() -> None:
    """
    Log the URLs the API is accessible at.

    The port comes from ``HOST_PORT`` so Docker-mapped ports are reported
    correctly. Defaults to 8000.
    """
    host_port = os.getenv("HOST_PORT", "8000")
    local_ip = get_local_ip()
    network_line = (
        f"  Network: http://{local_ip}:{host_port}"
        if local_ip
        else "  Network: (unavailable)"
    )
    logger.info(
        "SES Event Transformer running at:\n"
        "  Local:   http://localhost:%s\n"
        "%s",
        host_port,
        network_line,
    )


@app.get("/")
async def root():
    return {"message": "SES Event Transformer", "version": API_VERSION}


@app.get("/health")
async def health():
    return {"status": "ok"}
