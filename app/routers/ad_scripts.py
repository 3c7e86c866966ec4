from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool
from ..auth import require_signature
from ..dependencies import get_callback_handler, get_task_service
from ..models import NewAdScriptRequest, TaskDetail, TaskDetailResponse, TaskResponse, TaskSummary
from ..services.callbacks import CallbackHandler
from ..services.tasks import TaskService

router = APIRouter(prefix="/ad-scripts", tags=["ad-scripts"])

# Redis calls block; plain handlers run in the threadpool.
@router.post("", response_model=TaskResponse, status_code=201)
def create_ad_script(payload: NewAdScriptRequest, service: TaskService = Depends(get_task_service)):
    rec = service.submit(payload.reference_script, payload.outcome_description)
    return TaskResponse(message="Ad script task created successfully", data=TaskSummary.of(rec))

@router.get("/{task_id}", response_model=TaskDetailResponse)
def get_ad_script(task_id: str, service: TaskService = Depends(get_task_service)):
    return TaskDetailResponse(data=TaskDetail.of(service.get(task_id)))

@router.post("/{task_id}/result", response_model=TaskResponse, name="ad-scripts.result")
async def receive_result(
    task_id: str,
    request: Request,
    signature: str = Depends(require_signature),
    handler: CallbackHandler = Depends(get_callback_handler),
):
    body = await request.body()
    rec = await run_in_threadpool(handler.handle_result, task_id, body, signature)
    return TaskResponse(message="Result accepted", data=TaskSummary.of(rec))
