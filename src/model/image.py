from dataclasses import dataclass
from datetime import UTC, datetime

from pydantic import BaseModel
from sqlmodel import Field, SQLModel


class ImageRecord(SQLModel, table=True):
    image_id: str = Field(primary_key=True)
    blob_location: str
    derived_artifact: str  # 생성 시 원본 data URI, 워커가 썸네일로 교체
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC), index=True)
    processed: bool = Field(default=False)  # 워커만 True로 바꾼다


# 생성 이후 변경 가능한 필드 (워커 전용)
MUTABLE_FIELDS = frozenset({"processed", "derived_artifact"})


def to_iso(value: datetime) -> str:
    """UTC ISO-8601 문자열 (밀리초, 'Z' 접미사).

    SQLite는 tzinfo를 저장하지 않으므로 naive 값은 UTC로 간주한다.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class IngestResult:
    image_id: str
    blob_location: str


# --- 응답 스키마 (필드명은 기존 클라이언트와의 wire 호환용) ---


class GalleryImage(BaseModel):
    imageId: str
    imageUrl: str
    thumbnail: str
    uploadedAt: str
    lambdaProcessed: bool

    @classmethod
    def from_record(cls, record: ImageRecord) -> "GalleryImage":
        return cls(
            imageId=record.image_id,
            imageUrl=record.blob_location,
            thumbnail=record.derived_artifact,
            uploadedAt=to_iso(record.created_at),
            lambdaProcessed=record.processed,
        )


class GalleryResponse(BaseModel):
    images: list[GalleryImage]


class UploadResponse(BaseModel):
    message: str = "Image uploaded successfully"
    imageId: str
    imageUrl: str
