"""처리 이벤트 전송 채널.

채널은 단방향이다: publish()는 이벤트를 넘기기만 하고 처리 결과를 돌려받지 않는다.
전송 자체가 실패하면 예외를 던진다 (디스패처가 로그/카운터로 기록).
"""

from typing import Protocol

import httpx


class Channel(Protocol):
    def publish(self, message: dict) -> None: ...


class LocalWorkerChannel:
    """같은 프로세스의 워커에 이벤트를 바로 넘긴다 (로컬 개발용)."""

    def __init__(self, worker):
        self.worker = worker

    def publish(self, message: dict) -> None:
        # 워커 실패는 워커가 스스로 기록한다. 전송은 성공한 것으로 본다.
        self.worker.handle(message)


class HttpWorkerChannel:
    """외부 워커 엔드포인트로 {"imageId"} JSON을 POST한다.

    2xx가 아니면 전송 실패로 간주한다. 응답 본문은 사용하지 않는다.
    """

    def __init__(
        self, url: str, timeout: float = 5.0, transport: httpx.BaseTransport | None = None
    ):
        self.url = url
        self.timeout = timeout
        # 디스패치 스레드들이 함께 쓰는 클라이언트 하나 (httpx.Client는 스레드 안전)
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def publish(self, message: dict) -> None:
        response = self._client.post(self.url, json=message)
        response.raise_for_status()
