from datetime import timedelta

from fastapi import APIRouter, Depends, File, UploadFile

from core.config import settings
from core.dependencies import get_coordinator, get_metadata_store
from core.exceptions import UploadTooLarge, UploadValidationError
from core.metrics import telemetry
from model.image import GalleryImage, GalleryResponse, UploadResponse
from service import image_service
from service.image_service import IngestionCoordinator
from storage.metadata_store import MetadataStore

router = APIRouter(prefix="/api", tags=["images"])


@router.post("/upload", response_model=UploadResponse)
def upload_image(
    image: UploadFile | None = File(None),
    coordinator: IngestionCoordinator = Depends(get_coordinator),
):
    """multipart 필드 image → 원본 저장 + 메타데이터 기록 + 처리 트리거."""
    if image is None:
        raise UploadValidationError("No file uploaded")

    # 한도 + 1바이트만 읽어서 초과 여부를 판단한다
    data = image.file.read(settings.MAX_UPLOAD_BYTES + 1)
    if len(data) > settings.MAX_UPLOAD_BYTES:
        raise UploadTooLarge()

    result = coordinator.ingest(data, image.content_type or "", image.filename)
    return UploadResponse(imageId=result.image_id, imageUrl=result.blob_location)


@router.get("/images", response_model=GalleryResponse)
def list_images(metadata_store: MetadataStore = Depends(get_metadata_store)):
    records = image_service.list_images(metadata_store)
    return GalleryResponse(images=[GalleryImage.from_record(r) for r in records])


@router.get("/status")
def status(metadata_store: MetadataStore = Depends(get_metadata_store)):
    """관측 카운터 + Pending에 머문 레코드 수."""
    summary = image_service.pending_summary(
        metadata_store, timedelta(seconds=settings.PENDING_STALE_SECONDS)
    )
    return {**telemetry.snapshot(), **summary}
