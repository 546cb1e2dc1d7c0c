"""
Domain models — Pydantic types for devsetup.

    from devsetup.core.models import CommandSpec, CommandResult, TaskReceipt, TaskState
"""

from devsetup.core.models.command import CommandResult, CommandSpec, ExecutionMode
from devsetup.core.models.receipt import TaskReceipt, TaskState

__all__ = [
    # command.py
    "CommandResult",
    "CommandSpec",
    "ExecutionMode",
    # receipt.py
    "TaskReceipt",
    "TaskState",
]
