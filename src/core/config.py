from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # 앱 설정
    APP_NAME: str = "image-ingest"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # 서버 설정
    HOST: str = "0.0.0.0"
    PORT: int = 5001
    FRONTEND_URL: str = "http://localhost:3000"

    # 메타데이터 DB
    DATABASE_URL: str = "sqlite:///./image_ingest.db"

    # 원본 저장소: local | minio
    BLOB_BACKEND: str = "local"
    BLOB_DIR: str = "./storage/blobs"
    BLOB_BASE_URL: str = "http://localhost:5001/blobs"

    MINIO_ENDPOINT: str = "localhost:9000"
    MINIO_ACCESS_KEY: str = "minioadmin"
    MINIO_SECRET_KEY: str = "minioadmin"
    MINIO_BUCKET: str = "images"
    MINIO_SECURE: bool = False
    MINIO_PUBLIC_URL: str = "http://localhost:9000"

    # 처리 트리거: local (프로세스 내 워커) | http (외부 워커 엔드포인트)
    DISPATCH_MODE: str = "local"
    WORKER_URL: str = "http://localhost:5001/internal/process"
    DISPATCH_TIMEOUT: float = 5.0

    # 업로드 / 처리 제한
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024
    THUMBNAIL_SIZE: int = 256
    PENDING_STALE_SECONDS: int = 300

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
