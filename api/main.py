# api/main.py
from dotenv import load_dotenv
import os

env = os.getenv("APP_ENV", "local")
load_dotenv(".env.local" if env == "local" else ".env")

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import List
import logging

from database.db import init_db, engine
from api.routers import health, importer, vault

logger = logging.getLogger(__name__)


def _allowed_origins() -> List[str]:
    if env == "local":
        return ["http://localhost:3000", "http://localhost:5173"]  # Vite / CRA dev servers
    origins_str = os.getenv("ALLOWED_ORIGINS", "")
    return [origin.strip() for origin in origins_str.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"🚀 ResearchVault starting ({env}), preparing {engine.dialect.name} storage")
    try:
        init_db()
    except Exception as e:
        logger.error(f"❌ Could not prepare storage: {e}", exc_info=True)
        raise
    yield
    logger.info("🛑 ResearchVault stopped")


app = FastAPI(
    title="ResearchVault API",
    version="1.0.0",
    description="Imports pasted paper exports into a normalized, persistent research vault.",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(health.router)
app.include_router(vault.router, prefix="/api", tags=["Vault"])
app.include_router(importer.router, prefix="/api/import", tags=["Import"])


@app.get("/")
async def root():
    return {"message": "ResearchVault Backend Running 🚀"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("api.main:app", host="0.0.0.0", port=int(os.getenv("PORT", "3001")))
