"""프로세스 전역 공유 리소스.

저장소 클라이언트, 디스패처, 워커는 처음 요청될 때 한 번 생성되어(lru_cache)
모든 요청이 같은 인스턴스를 참조한다. lifespan에서 시작 시 미리 생성한다.
요청마다 다시 만들지 않고, 프로세스 종료 외의 정리 단계는 없다.
"""

from functools import lru_cache

from fastapi import Depends
from minio import Minio

from core.config import settings
from model.database import engine
from processor.channels import HttpWorkerChannel, LocalWorkerChannel
from processor.dispatcher import ProcessingDispatcher
from processor.worker import ProcessingWorker
from service.image_service import IngestionCoordinator
from storage.blob_store import BlobStore, LocalBlobStore, MinioBlobStore
from storage.metadata_store import MetadataStore


@lru_cache
def get_metadata_store() -> MetadataStore:
    return MetadataStore(engine)


@lru_cache
def get_blob_store() -> BlobStore:
    if settings.BLOB_BACKEND == "minio":
        client = Minio(
            settings.MINIO_ENDPOINT,
            access_key=settings.MINIO_ACCESS_KEY,
            secret_key=settings.MINIO_SECRET_KEY,
            secure=settings.MINIO_SECURE,
        )
        return MinioBlobStore(client, settings.MINIO_BUCKET, settings.MINIO_PUBLIC_URL)
    if settings.BLOB_BACKEND == "local":
        return LocalBlobStore(settings.BLOB_DIR, settings.BLOB_BASE_URL)
    raise ValueError(f"Unknown BLOB_BACKEND: {settings.BLOB_BACKEND}")


@lru_cache
def get_worker() -> ProcessingWorker:
    return ProcessingWorker(get_metadata_store(), thumbnail_size=settings.THUMBNAIL_SIZE)


@lru_cache
def get_dispatcher() -> ProcessingDispatcher:
    if settings.DISPATCH_MODE == "http":
        channel = HttpWorkerChannel(settings.WORKER_URL, timeout=settings.DISPATCH_TIMEOUT)
    elif settings.DISPATCH_MODE == "local":
        channel = LocalWorkerChannel(get_worker())
    else:
        raise ValueError(f"Unknown DISPATCH_MODE: {settings.DISPATCH_MODE}")
    return ProcessingDispatcher(channel)


def get_coordinator(
    blob_store: BlobStore = Depends(get_blob_store),
    metadata_store: MetadataStore = Depends(get_metadata_store),
    dispatcher: ProcessingDispatcher = Depends(get_dispatcher),
) -> IngestionCoordinator:
    """코디네이터 자체는 상태가 없다. 공유 핸들만 묶어서 넘긴다."""
    return IngestionCoordinator(
        blob_store,
        metadata_store,
        dispatcher,
        max_bytes=settings.MAX_UPLOAD_BYTES,
    )
