"""이미지 메타데이터 저장소 (image_id 키).

쓰기 주체:
- put: IngestionCoordinator만 호출 (레코드 최초 생성)
- update_field: ProcessingWorker만 호출 (processed / derived_artifact)
"""

from typing import Any

from loguru import logger
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from core.exceptions import MetadataWriteError, QueryError
from model.image import MUTABLE_FIELDS, ImageRecord


class MetadataStore:
    def __init__(self, engine: Engine):
        self._engine = engine

    def _session(self) -> Session:
        # 세션 밖에서도 레코드 속성을 읽을 수 있어야 한다
        return Session(self._engine, expire_on_commit=False)

    def put(self, record: ImageRecord) -> None:
        try:
            with self._session() as session:
                session.add(record)
                session.commit()
        except SQLAlchemyError as e:
            raise MetadataWriteError(f"Failed to store metadata for {record.image_id}") from e

    def get(self, image_id: str) -> ImageRecord | None:
        try:
            with self._session() as session:
                return session.get(ImageRecord, image_id)
        except SQLAlchemyError as e:
            raise QueryError(f"Failed to read metadata for {image_id}") from e

    def scan_all(self) -> list[ImageRecord]:
        """모든 레코드를 반환한다. 순서는 보장하지 않는다."""
        try:
            with self._session() as session:
                return list(session.exec(select(ImageRecord)).all())
        except SQLAlchemyError as e:
            raise QueryError() from e

    def update_field(self, image_id: str, field: str, value: Any) -> bool:
        """단일 필드를 갱신한다.

        레코드가 없으면 경고만 남기고 False를 반환한다.
        워커는 id만 받으므로 레코드 존재를 보장할 수 없다.
        """
        if field not in MUTABLE_FIELDS:
            raise ValueError(f"Field is not mutable after creation: {field}")

        try:
            with self._session() as session:
                record = session.get(ImageRecord, image_id)
                if record is None:
                    logger.warning(f"update_field skipped, no record: {image_id} ({field})")
                    return False
                setattr(record, field, value)
                session.add(record)
                session.commit()
        except SQLAlchemyError as e:
            raise MetadataWriteError(f"Failed to update {field} for {image_id}") from e
        return True
