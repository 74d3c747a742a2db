import uuid
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from loguru import logger

from core.exceptions import (
    BlobWriteError,
    DispatchError,
    MetadataWriteError,
    UploadTooLarge,
    UploadValidationError,
)
from core.metrics import telemetry
from model.image import ImageRecord, IngestResult
from processor.dispatcher import ProcessingDispatcher
from storage.blob_store import BlobStore
from storage.metadata_store import MetadataStore
from utility import data_uri

MAX_UPLOAD_BYTES = 5 * 1024 * 1024


def _new_image_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(UTC)


class IngestionCoordinator:
    """업로드 하나를 세 개의 부수효과로 바꾼다: blob 쓰기 → 메타데이터 쓰기 → 처리 디스패치.

    두 저장소 사이에는 트랜잭션이 없다. 메타데이터 쓰기가 실패하면 이미 저장된
    blob은 롤백하지 않고 고아로 남기며, 별도 로그(event=orphaned_blob)와
    카운터로 보고한다.
    """

    def __init__(
        self,
        blob_store: BlobStore,
        metadata_store: MetadataStore,
        dispatcher: ProcessingDispatcher,
        *,
        max_bytes: int = MAX_UPLOAD_BYTES,
        id_factory: Callable[[], str] = _new_image_id,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.blob_store = blob_store
        self.metadata_store = metadata_store
        self.dispatcher = dispatcher
        self.max_bytes = max_bytes
        self._id_factory = id_factory
        self._clock = clock

    def validate(self, data: bytes | None, content_type: str | None) -> None:
        """쓰기 전에 거부해야 하는 입력을 걸러낸다."""
        if not data:
            raise UploadValidationError("No file uploaded")
        if len(data) > self.max_bytes:
            raise UploadTooLarge(f"File exceeds the {self.max_bytes} byte limit")
        if not content_type or not content_type.startswith("image/"):
            raise UploadValidationError("Only image files are supported")

    def ingest(
        self, data: bytes, content_type: str, filename: str | None = None
    ) -> IngestResult:
        self.validate(data, content_type)

        # 1. 원본 저장. 실패하면 아무것도 남지 않는다.
        try:
            location = self.blob_store.put(data, content_type, filename)
        except BlobWriteError as e:
            telemetry.increment("blob_write_failures")
            logger.error(f"Blob write failed: {e}")
            raise

        # 2~3. 레코드 생성. 썸네일 자리에는 원본 data URI를 그대로 넣는다.
        image_id = self._id_factory()
        record = ImageRecord(
            image_id=image_id,
            blob_location=location,
            derived_artifact=data_uri.encode(data, content_type),
            created_at=self._clock(),
            processed=False,
        )
        try:
            self.metadata_store.put(record)
        except MetadataWriteError as e:
            self._report_orphan(location, image_id, e)
            raise

        # 5. 결과를 기다리지 않는다. 레코드는 이미 조회 가능하다.
        try:
            self.dispatcher.send(image_id)
        except DispatchError as e:
            telemetry.increment("dispatch_failures")
            logger.bind(event="dispatch_failed", image_id=image_id).error(
                f"{e}; record stays pending"
            )

        telemetry.increment("ingested")
        logger.info(f"Image ingested: {image_id} -> {location}")
        return IngestResult(image_id=image_id, blob_location=location)

    def _report_orphan(self, location: str, image_id: str, exc: Exception) -> None:
        telemetry.increment("metadata_write_failures")
        telemetry.record_orphan(location)
        logger.bind(event="orphaned_blob", blob_location=location, image_id=image_id).error(
            f"Orphaned blob {location}: metadata write failed ({exc.__cause__ or exc})"
        )


def list_images(metadata_store: MetadataStore) -> list[ImageRecord]:
    """갤러리 목록. 처리 완료 여부와 무관하게 전부 반환한다 (최신순).

    페이지네이션/필터링/검색은 클라이언트 몫이다.
    """
    records = metadata_store.scan_all()
    records.sort(key=lambda r: r.image_id)
    records.sort(key=lambda r: _as_utc(r.created_at), reverse=True)
    return records


def pending_summary(
    metadata_store: MetadataStore,
    stale_after: timedelta,
    now: datetime | None = None,
) -> dict:
    """처리되지 않은 레코드 수와, 그중 stale_after보다 오래된 수.

    재시도는 하지 않는다. Pending에 멈춘 레코드를 드러내기만 한다.
    """
    now = now or _utcnow()
    pending = [r for r in metadata_store.scan_all() if not r.processed]
    stale = [
        r for r in pending
        if now - _as_utc(r.created_at) > stale_after
    ]
    return {"pending": len(pending), "stale_pending": len(stale)}


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=UTC)
