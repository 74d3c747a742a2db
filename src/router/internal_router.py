from fastapi import APIRouter, BackgroundTasks, Depends, status
from pydantic import BaseModel

from core.dependencies import get_worker
from processor.worker import ProcessingWorker

router = APIRouter(prefix="/internal", tags=["internal"])


class ProcessEvent(BaseModel):
    imageId: str


@router.post("/process", status_code=status.HTTP_202_ACCEPTED)
def process(
    event: ProcessEvent,
    background_tasks: BackgroundTasks,
    worker: ProcessingWorker = Depends(get_worker),
):
    """디스패치 수신 경계. 이벤트를 받아두고 응답 후에 워커를 실행한다.

    처리 결과는 응답에 담기지 않는다 (레코드의 processed 필드로만 드러난다).
    """
    background_tasks.add_task(worker.handle, event.model_dump())
    return {"status": "accepted", "imageId": event.imageId}
