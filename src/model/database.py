from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

from core.config import settings


def build_engine(url: str) -> Engine:
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, echo=False, connect_args=connect_args)


engine = build_engine(settings.DATABASE_URL)


def create_db_and_tables(bind: Engine | None = None) -> None:
    """테이블이 없으면 생성한다. 이미 있으면 아무것도 하지 않는다."""
    import model.image  # noqa: F401 — 테이블 등록

    SQLModel.metadata.create_all(bind or engine)
