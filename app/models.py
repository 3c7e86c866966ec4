from pydantic import BaseModel, model_validator
from typing import Optional
from .storage.schema import TaskRecord, TaskStatus

class NewAdScriptRequest(BaseModel):
    reference_script: str
    outcome_description: str

class TaskSummary(BaseModel):
    id: str
    status: TaskStatus

    @classmethod
    def of(cls, rec: TaskRecord) -> "TaskSummary":
        return cls(id=rec.id, status=rec.status)

class TaskResponse(BaseModel):
    message: str
    data: TaskSummary

class TaskDetail(BaseModel):
    id: str
    reference_script: str
    outcome_description: str
    new_script: Optional[str] = None
    analysis: Optional[str] = None
    error_message: Optional[str] = None
    status: TaskStatus
    created_at: str
    updated_at: str

    @classmethod
    def of(cls, rec: TaskRecord) -> "TaskDetail":
        return cls(
            id=rec.id,
            reference_script=rec.reference_script,
            outcome_description=rec.outcome_description,
            new_script=rec.new_script,
            analysis=rec.analysis,
            error_message=rec.error_message,
            status=rec.status,
            created_at=rec.created_at.isoformat(),
            updated_at=rec.updated_at.isoformat(),
        )

class TaskDetailResponse(BaseModel):
    data: TaskDetail

class WorkflowResult(BaseModel):
    """A result reported by the workflow engine, synchronously or by callback.

    Either both ``new_script`` and ``analysis`` are present (success) or
    ``error`` is (failure report).
    """
    new_script: Optional[str] = None
    analysis: Optional[str] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def _one_outcome(self):
        succeeded = bool(self.new_script) and bool(self.analysis)
        if self.error and (self.new_script or self.analysis):
            raise ValueError("result cannot carry both a script and an error")
        if not self.error and not succeeded:
            raise ValueError("new_script and analysis are required")
        return self

    @property
    def failed(self) -> bool:
        return bool(self.error)

class CallbackPayload(WorkflowResult):
    task_id: str
