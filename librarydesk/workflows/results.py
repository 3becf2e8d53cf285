"""
Structured workflow results.

Workflows return a WorkflowResult instead of building responses; the API
layer decides whether that becomes a redirect with a flash message, a
confirmation page or a JSON acknowledgment.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class ResultStatus(str, Enum):
    """Outcome of a workflow call."""
    SUCCESS = "success"
    CONFIRM = "confirm"     # caller must ask the user before acting
    FAILURE = "failure"     # soft failure, nothing raised


@dataclass
class WorkflowResult:
    status: ResultStatus
    message: str
    redirect_target: Optional[str] = None
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == ResultStatus.SUCCESS

    @classmethod
    def success(cls, message: str, redirect_target: Optional[str] = None, **data: Any) -> "WorkflowResult":
        return cls(ResultStatus.SUCCESS, message, redirect_target, data)

    @classmethod
    def confirm(cls, message: str, redirect_target: str, **data: Any) -> "WorkflowResult":
        return cls(ResultStatus.CONFIRM, message, redirect_target, data)

    @classmethod
    def failure(cls, message: str, **data: Any) -> "WorkflowResult":
        return cls(ResultStatus.FAILURE, message, None, data)

    def to_dict(self) -> dict:
        return {
            "success": self.ok,
            "status": self.status.value,
            "message": self.message,
            "redirect_target": self.redirect_target,
            **self.data,
        }
