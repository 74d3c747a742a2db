"""갤러리 조회 (list_images, pending_summary) 테스트."""

from datetime import UTC, datetime, timedelta, timezone

from model.image import GalleryImage, ImageRecord, to_iso
from service import image_service


def _put(store, image_id: str, created_at: datetime, processed: bool = False) -> None:
    store.put(
        ImageRecord(
            image_id=image_id,
            blob_location=f"http://blobs/{image_id}",
            derived_artifact="data:image/png;base64,AAAA",
            created_at=created_at,
            processed=processed,
        )
    )


def test_list_empty(metadata_store):
    assert image_service.list_images(metadata_store) == []


def test_list_newest_first(metadata_store):
    base = datetime(2024, 5, 1, tzinfo=UTC)
    _put(metadata_store, "old", base)
    _put(metadata_store, "new", base + timedelta(hours=2))
    _put(metadata_store, "mid", base + timedelta(hours=1))

    ids = [r.image_id for r in image_service.list_images(metadata_store)]
    assert ids == ["new", "mid", "old"]


def test_list_includes_unprocessed(metadata_store):
    now = datetime.now(UTC)
    _put(metadata_store, "a", now, processed=True)
    _put(metadata_store, "b", now, processed=False)

    records = image_service.list_images(metadata_store)
    assert {r.image_id: r.processed for r in records} == {"a": True, "b": False}


def test_pending_summary(metadata_store):
    now = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
    _put(metadata_store, "fresh", now - timedelta(seconds=30))
    _put(metadata_store, "stuck", now - timedelta(hours=1))
    _put(metadata_store, "done", now - timedelta(hours=2), processed=True)

    summary = image_service.pending_summary(metadata_store, timedelta(minutes=5), now=now)

    assert summary == {"pending": 2, "stale_pending": 1}


def test_gallery_wire_names():
    record = ImageRecord(
        image_id="img-1",
        blob_location="http://blobs/img-1",
        derived_artifact="data:image/png;base64,AAAA",
        created_at=datetime(2024, 1, 2, 3, 4, 5, 678000),
        processed=False,
    )

    assert GalleryImage.from_record(record).model_dump() == {
        "imageId": "img-1",
        "imageUrl": "http://blobs/img-1",
        "thumbnail": "data:image/png;base64,AAAA",
        "uploadedAt": "2024-01-02T03:04:05.678Z",
        "lambdaProcessed": False,
    }


def test_to_iso_converts_to_utc():
    kst = datetime(2024, 1, 1, 18, 0, tzinfo=timezone(timedelta(hours=9)))
    assert to_iso(kst) == "2024-01-01T09:00:00.000Z"
