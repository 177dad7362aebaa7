"""FastAPI application for the purchase funnel backend."""

import os
import sys
import logging
import tomllib
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# Adapters read their settings from the environment when imported
load_dotenv()

_src_path = Path(__file__).parent.parent
sys.path.insert(0, str(_src_path))

from api.routes import checkout, cron, health, members, stats, unsubscribe, webhooks
from utils.logging import setup_structured_logging
from adapter.mongodb.connection import get_mongodb_client, DATABASE_NAME
from adapter.mongodb.indexes import ensure_all_indexes

setup_structured_logging()

logger = logging.getLogger(__name__)

with open(_src_path.parent / "pyproject.toml", "rb") as f:
    VERSION = tomllib.load(f)["project"]["version"]

SERVICE_NAME = "Tom's Trading Room Funnel API"

ROUTERS = (webhooks, checkout, cron, unsubscribe, stats, members, health)


def cors_settings(origins_env: str) -> tuple[list[str], bool]:
    """Parse ``CORS_ORIGINS`` into (origins, allow_credentials).

    Browsers reject credentials with a wildcard origin, so ``*`` disables them.
    """
    if origins_env.strip() == "*":
        return ["*"], False
    origins = [origin.strip() for origin in origins_env.split(",") if origin.strip()]
    return origins, True


@asynccontextmanager
async def lifespan(app: FastAPI):
    client = get_mongodb_client()
    if client is None:
        logger.warning("MongoDB unavailable at startup, member indexes not checked")
    elif ensure_all_indexes(client[DATABASE_NAME]):
        logger.info("Member indexes ready", extra={"database": DATABASE_NAME})
    else:
        logger.warning("Some member indexes could not be created", extra={"database": DATABASE_NAME})

    logger.info("Service started", extra={"service": SERVICE_NAME, "version": VERSION})
    yield


app = FastAPI(
    title=SERVICE_NAME,
    description="Purchase funnel backend: Whop webhooks, member emails and checkout tracking",
    version=VERSION,
    lifespan=lifespan,
)

cors_origins, allow_credentials = cors_settings(os.getenv("CORS_ORIGINS", "*"))
if cors_origins == ["*"]:
    logger.warning("CORS allows any origin; set CORS_ORIGINS to the marketing site domain in production")
else:
    logger.info("CORS configured", extra={"origins": cors_origins})

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

for module in ROUTERS:
    app.include_router(module.router)


@app.get("/")
async def root():
    return {
        "service": SERVICE_NAME,
        "version": VERSION,
        "status": "running"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=int(os.getenv("PORT", 8000)),
        access_log=False
    )
