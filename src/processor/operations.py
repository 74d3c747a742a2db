"""
순수 CPU-bound 이미지 처리 함수.
모든 함수는 PIL.Image를 받아서 PIL.Image를 반환한다.
"""

import io

from PIL import Image


def resize(image: Image.Image, width: int, height: int) -> Image.Image:
    return image.resize((width, height), Image.LANCZOS)


def thumbnail(image: Image.Image, max_size: int = 256) -> Image.Image:
    """긴 변이 max_size를 넘지 않도록 비율을 유지하며 축소한다. 확대는 하지 않는다."""
    width, height = image.size
    scale = min(1.0, max_size / max(width, height))
    result = image.convert("RGB")
    if scale < 1.0:
        result = resize(result, max(1, round(width * scale)), max(1, round(height * scale)))
    return result


def encode_jpeg(image: Image.Image, quality: int = 85) -> bytes:
    buf = io.BytesIO()
    image.save(buf, "JPEG", quality=quality)
    return buf.getvalue()
