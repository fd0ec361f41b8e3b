"""Transient user-visible notifications."""
from enum import Enum

from pydantic import BaseModel


class NotificationVariant(str, Enum):
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


class Notification(BaseModel):
    """A short message shown once to the user after an action."""
    title: str
    description: str = ""
    variant: NotificationVariant = NotificationVariant.DEFAULT

    @classmethod
    def success(cls, title: str, description: str = "") -> "Notification":
        return cls(title=title, description=description)

    @classmethod
    def failure(cls, title: str, description: str = "") -> "Notification":
        return cls(title=title, description=description, variant=NotificationVariant.DESTRUCTIVE)

    @property
    def is_error(self) -> bool:
        return self.variant == NotificationVariant.DESTRUCTIVE
