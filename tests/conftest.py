"""pytest 공용 fixture.

모든 테스트는 in-memory SQLite DB와 임시 디렉토리 blob 저장소를 사용하여 격리된다.
- metadata_store / blob_store: 실제 저장소 구현
- channel: 전송된 메시지를 기록만 하는 채널 (레코드는 Pending으로 남는다)
- dispatcher: 스레드 대신 즉시 실행하는 디스패처
- client: 위 리소스로 의존성을 오버라이드한 TestClient
"""

import os
import sys
import tempfile
from pathlib import Path

# settings는 import 시점에 생성되므로 앱 import 전에 설정한다
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BLOB_DIR", tempfile.mkdtemp(prefix="image-ingest-blobs-"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

# src/ 디렉토리를 import path에 추가
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from core import dependencies
from core.metrics import telemetry
from main import app
from processor.dispatcher import ProcessingDispatcher
from processor.worker import ProcessingWorker
from service.image_service import IngestionCoordinator
from storage.blob_store import LocalBlobStore
from storage.metadata_store import MetadataStore

import model.image  # noqa: F401 — 테이블 등록


class RecordingChannel:
    """publish된 메시지를 모아두기만 한다."""

    def __init__(self):
        self.messages: list[dict] = []

    def publish(self, message: dict) -> None:
        self.messages.append(message)


class CountingBlobStore(LocalBlobStore):
    """실제 파일 저장 + 쓰기 횟수 기록."""

    def __init__(self, root: str, base_url: str):
        super().__init__(root, base_url)
        self.locations: list[str] = []

    def put(self, data: bytes, content_type: str, filename: str | None = None) -> str:
        location = super().put(data, content_type, filename)
        self.locations.append(location)
        return location


def run_inline(fn, *args) -> None:
    fn(*args)


@pytest.fixture(autouse=True)
def reset_telemetry():
    telemetry.reset()
    yield
    telemetry.reset()


@pytest.fixture()
def engine():
    """테스트마다 새 in-memory SQLite DB를 생성한다.

    StaticPool을 사용해야 모든 커넥션이 같은 in-memory DB를 공유한다.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def metadata_store(engine):
    return MetadataStore(engine)


@pytest.fixture()
def blob_store(tmp_path):
    return CountingBlobStore(str(tmp_path / "blobs"), "http://testserver/blobs")


@pytest.fixture()
def channel():
    return RecordingChannel()


@pytest.fixture()
def dispatcher(channel):
    return ProcessingDispatcher(channel, spawn=run_inline)


@pytest.fixture()
def worker(metadata_store):
    return ProcessingWorker(metadata_store, thumbnail_size=64)


@pytest.fixture()
def coordinator(blob_store, metadata_store, dispatcher):
    return IngestionCoordinator(blob_store, metadata_store, dispatcher)


@pytest.fixture()
def client(metadata_store, blob_store, dispatcher, worker):
    """공유 리소스 의존성을 테스트용 인스턴스로 오버라이드한 TestClient."""
    app.dependency_overrides[dependencies.get_metadata_store] = lambda: metadata_store
    app.dependency_overrides[dependencies.get_blob_store] = lambda: blob_store
    app.dependency_overrides[dependencies.get_dispatcher] = lambda: dispatcher
    app.dependency_overrides[dependencies.get_worker] = lambda: worker
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def log_records():
    """loguru 레코드를 수집한다."""
    from loguru import logger

    records = []
    sink_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(sink_id)
