"""인라인 미리보기용 data URI 인코딩/디코딩."""

import base64
import binascii


def encode(data: bytes, content_type: str) -> str:
    return f"data:{content_type};base64,{base64.b64encode(data).decode('ascii')}"


def decode(uri: str) -> tuple[str, bytes]:
    """data URI → (content_type, bytes). base64 형식이 아니면 ValueError."""
    header, sep, payload = uri.partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise ValueError("Not a base64 data URI")

    content_type = header[len("data:"):-len(";base64")]
    try:
        return content_type, base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise ValueError("Invalid base64 payload") from e
