import os

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from core.config import settings
from core.error_handlers import register_exception_handlers
from core.lifespan import lifespan
from core.middleware import RequestLoggingMiddleware
from router.image_router import router as image_router
from router.internal_router import router as internal_router
from utility.logger import setup_logger

setup_logger(settings.LOG_LEVEL)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Image ingestion: blob store + metadata + async thumbnail processing",
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_exception_handlers(app)

app.include_router(image_router)
app.include_router(internal_router)

if settings.BLOB_BACKEND == "local":
    os.makedirs(settings.BLOB_DIR, exist_ok=True)
    app.mount("/blobs", StaticFiles(directory=settings.BLOB_DIR), name="blobs")


@app.get("/health")
async def health():
    return {"status": "ok", "service": settings.APP_NAME, "version": settings.APP_VERSION}


@app.get("/")
async def root():
    return {
        "message": "Image ingestion API",
        "version": settings.APP_VERSION,
        "endpoints": {
            "health": "/health",
            "upload": "POST /api/upload",
            "images": "GET /api/images",
            "status": "GET /api/status",
        },
    }


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        access_log=False,
    )
