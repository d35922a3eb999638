"""Notification collaborators."""

from complizen.notifications.email_dispatcher import EmailDispatcher

__all__ = ["EmailDispatcher"]
