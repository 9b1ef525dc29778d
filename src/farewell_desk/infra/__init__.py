"""Collaborator implementations for farewell_desk."""

from farewell_desk.infra.asyncio_scheduler import AsyncioTaskScheduler

__all__ = ["AsyncioTaskScheduler"]
