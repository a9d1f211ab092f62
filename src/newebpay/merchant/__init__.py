"""Merchant package initialization."""

from .notify_handler import NotifyHandler, NotifyEvent, ANY_STATUS

__all__ = [
    "NotifyHandler",
    "NotifyEvent",
    "ANY_STATUS",
]
