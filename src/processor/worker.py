"""처리 워커.

이벤트 {"imageId"}만 받는다. 나머지는 메타데이터 저장소에서 읽는다.

성공: derived_artifact를 JPEG 썸네일로 교체한 뒤 processed=True로 갱신
실패: 아무것도 갱신하지 않는다 (레코드는 Pending으로 남고 코디네이터로의 콜백은 없다)
"""

import io

from loguru import logger
from PIL import Image, UnidentifiedImageError

from core.exceptions import AppException
from core.metrics import telemetry
from processor import operations
from storage.metadata_store import MetadataStore
from utility import data_uri
from utility.timer import timer


class ProcessingWorker:
    def __init__(self, metadata_store: MetadataStore, thumbnail_size: int = 256):
        self.metadata_store = metadata_store
        self.thumbnail_size = thumbnail_size

    def handle(self, event: dict) -> bool:
        image_id = event.get("imageId")
        if not image_id:
            logger.warning(f"Worker event without imageId: {event}")
            return False

        try:
            completed = self._process(image_id)
        except (AppException, ValueError, OSError, UnidentifiedImageError) as e:
            logger.bind(event="worker_failed", image_id=image_id).error(
                f"Processing failed for {image_id}: {e}"
            )
            telemetry.increment("worker_failures")
            return False
        except Exception:
            # DecompressionBombError 등 나머지 실패도 워커 실패로 집계한다
            logger.bind(event="worker_failed", image_id=image_id).exception(
                f"Processing failed for {image_id}"
            )
            telemetry.increment("worker_failures")
            return False

        if completed:
            telemetry.increment("worker_completed")
        return completed

    def _process(self, image_id: str) -> bool:
        record = self.metadata_store.get(image_id)
        if record is None:
            logger.warning(f"Worker skipped {image_id}: record not found")
            return False

        _, original = data_uri.decode(record.derived_artifact)
        with timer(f"thumbnail {image_id}"):
            img = Image.open(io.BytesIO(original))
            thumb = operations.thumbnail(img, self.thumbnail_size)
            artifact = data_uri.encode(operations.encode_jpeg(thumb), "image/jpeg")

        # 썸네일을 먼저 쓰고 나서 완료 표시를 한다
        if not self.metadata_store.update_field(image_id, "derived_artifact", artifact):
            return False
        if not self.metadata_store.update_field(image_id, "processed", True):
            return False

        logger.info(f"Processing completed for {image_id}")
        return True
