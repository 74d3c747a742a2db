import sys

from loguru import logger


def setup_logger(level: str = "INFO"):
    """Loguru 기본 설정. 앱 시작 시 한 번 호출.

    bind()로 붙인 event 값(orphaned_blob, dispatch_failed 등)은 extra로 함께 출력된다.
    """
    logger.remove()
    logger.add(
        sys.stderr,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level> {extra}"
        ),
        level=level,
    )
    return logger
