"""프로세스 내 관측 카운터.

호출자에게 노출되지 않는 실패(디스패치 실패, 고아 blob, 워커 실패)는
로그와 함께 여기에 집계되어 GET /api/status로 조회된다.
"""

import threading
from collections import deque

COUNTERS = (
    "ingested",
    "blob_write_failures",
    "metadata_write_failures",
    "orphaned_blobs",
    "dispatched",
    "dispatch_failures",
    "worker_completed",
    "worker_failures",
)

RECENT_ORPHANS = 20


class Telemetry:
    """스레드 안전 카운터 싱글턴.

    디스패치는 백그라운드 스레드에서 끝나므로 모든 갱신은 lock 안에서 한다.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self.reset()

    def reset(self) -> None:
        with self._lock:
            self._counters = dict.fromkeys(COUNTERS, 0)
            self._orphans: deque[str] = deque(maxlen=RECENT_ORPHANS)

    def increment(self, name: str) -> None:
        if name not in self._counters:
            raise KeyError(f"Unknown counter: {name}")
        with self._lock:
            self._counters[name] += 1

    def record_orphan(self, blob_location: str) -> None:
        with self._lock:
            self._counters["orphaned_blobs"] += 1
            self._orphans.append(blob_location)

    def snapshot(self) -> dict:
        with self._lock:
            return {
                **self._counters,
                "recent_orphans": list(self._orphans),
            }


telemetry = Telemetry()
