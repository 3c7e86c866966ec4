from datetime import datetime
from enum import Enum
from pydantic import BaseModel
from typing import Optional

class TaskStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (TaskStatus.COMPLETED, TaskStatus.FAILED)

class TaskRecord(BaseModel):
    id: str
    reference_script: str
    outcome_description: str
    status: TaskStatus = TaskStatus.PENDING
    new_script: Optional[str] = None
    analysis: Optional[str] = None
    error_message: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    def is_pending(self) -> bool:
        return self.status == TaskStatus.PENDING

    def is_processing(self) -> bool:
        return self.status == TaskStatus.PROCESSING

    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    def is_failed(self) -> bool:
        return self.status == TaskStatus.FAILED

    def is_terminal(self) -> bool:
        return self.status.terminal
