"""앱 전역 커스텀 예외 클래스.

AppException을 상속하면 전역 핸들러(error_handlers.py)가 자동으로
{"error": "...", "error_code": "..."} 형식의 JSON 응답을 생성한다.
"""


class AppException(Exception):
    """앱 전역 베이스 예외.

    서브클래스에서 status_code, error_code, message를 클래스 변수로 정의하면
    전역 핸들러가 해당 값을 읽어 HTTP 응답을 생성한다.
    """

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"
    message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        if message:
            self.message = message
        super().__init__(self.message)


# --- 업로드 검증 (쓰기 전에 거부) ---


class UploadValidationError(AppException):
    status_code = 400
    error_code = "INVALID_UPLOAD"
    message = "No file uploaded"


class UploadTooLarge(UploadValidationError):
    status_code = 413
    error_code = "UPLOAD_TOO_LARGE"
    message = "File exceeds the upload size limit"


# --- 저장소 ---


class BlobWriteError(AppException):
    status_code = 500
    error_code = "BLOB_WRITE_FAILED"
    message = "Upload failed"


class MetadataWriteError(AppException):
    """원본은 저장됐지만 메타데이터 기록에 실패한 경우 (고아 blob 발생)."""

    status_code = 500
    error_code = "METADATA_WRITE_FAILED"
    message = "Upload failed"


class QueryError(AppException):
    status_code = 500
    error_code = "QUERY_FAILED"
    message = "Failed to fetch images"


# --- 처리 트리거 ---


class DispatchError(AppException):
    """호출자에게는 노출되지 않는다. 로그/카운터로만 관측된다."""

    status_code = 500
    error_code = "DISPATCH_FAILED"
    message = "Failed to dispatch processing"
