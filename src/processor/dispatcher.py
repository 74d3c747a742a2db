"""Fire-and-forget 처리 디스패처.

send()는 {"imageId": ...} 메시지를 백그라운드 스레드에서 채널로 보내고 즉시 반환한다.
- 큐, 재시도, 타임아웃 취소 없음
- 전송 실패는 호출자에게 전달되지 않고 로그 + dispatch_failures 카운터로만 남는다
- 실패한 레코드는 processed=False 상태로 계속 남는다 (stale_pending으로 관측)
"""

import threading
from collections.abc import Callable

from loguru import logger

from core.exceptions import DispatchError
from core.metrics import telemetry
from processor.channels import Channel


def spawn_thread(fn: Callable, *args) -> None:
    """메시지마다 daemon 스레드 하나. 결과를 기다리지 않는다."""
    threading.Thread(target=fn, args=args, daemon=True, name="dispatch").start()


class ProcessingDispatcher:
    def __init__(self, channel: Channel, spawn: Callable = spawn_thread):
        self.channel = channel
        self._spawn = spawn

    def send(self, image_id: str) -> None:
        message = {"imageId": image_id}
        try:
            self._spawn(self._deliver, message)
        except RuntimeError as e:
            raise DispatchError(f"Could not schedule dispatch for {image_id}") from e

    def _deliver(self, message: dict) -> None:
        image_id = message["imageId"]
        try:
            self.channel.publish(message)
        except Exception:
            # 백그라운드 스레드라 다시 던지면 아무도 받지 못한다
            logger.bind(event="dispatch_failed", image_id=image_id).exception(
                f"Dispatch failed for {image_id}; record stays pending"
            )
            telemetry.increment("dispatch_failures")
            return

        telemetry.increment("dispatched")
        logger.info(f"Processing dispatched for {image_id}")
