"""Interface contracts for farewell_desk.

This module exports all Protocol-based interfaces for dependency injection.
"""

from farewell_desk.interfaces.attachments import AttachmentProviderInterface
from farewell_desk.interfaces.identity import IdentityInterface
from farewell_desk.interfaces.removal_store import (
    RemovalStoreInterface,
    RequestPromoterInterface,
)
from farewell_desk.interfaces.scheduler import ScheduledTask, TaskSchedulerInterface

__all__ = [
    "AttachmentProviderInterface",
    "IdentityInterface",
    "RemovalStoreInterface",
    "RequestPromoterInterface",
    "ScheduledTask",
    "TaskSchedulerInterface",
]
