from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from core.config import settings
from core.dependencies import get_blob_store, get_dispatcher, get_metadata_store, get_worker
from model.database import create_db_and_tables
from storage.blob_store import MinioBlobStore


@asynccontextmanager
async def lifespan(app: FastAPI):
    # === 시작 ===
    logger.info(f"{settings.APP_NAME} v{settings.APP_VERSION}")

    create_db_and_tables()
    logger.info(f"Database ready ({settings.DATABASE_URL})")

    # 공유 핸들을 시작 시 한 번 생성한다
    get_metadata_store()
    get_worker()
    blob_store = get_blob_store()
    if isinstance(blob_store, MinioBlobStore):
        blob_store.ensure_bucket()
    logger.info(f"Blob backend: {settings.BLOB_BACKEND}")

    get_dispatcher()
    logger.info(f"Dispatch mode: {settings.DISPATCH_MODE}")

    app.state.settings = settings

    yield

    # === 종료 ===
    logger.info("Shutting down")
