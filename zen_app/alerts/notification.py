"""Notification display collaborator."""

from abc import ABC, abstractmethod

from ..logging.config import get_logger

logger = get_logger(__name__)

DEFAULT_TITLE = "Stage change"


class NotificationDisplay(ABC):
    """Advisory overlay shown at stage boundaries and on completion."""

    @abstractmethod
    def show(self, title: str) -> None:
        pass

    @abstractmethod
    def hide(self) -> None:
        pass


class LoggingNotificationDisplay(NotificationDisplay):
    """Keeps the overlay state in memory and logs every change."""

    def __init__(self) -> None:
        self.logger = logger
        self.active = False
        self.title = DEFAULT_TITLE

    def show(self, title: str) -> None:
        self.active = True
        self.title = title
        self.logger.info("Notification shown", title=title)

    def hide(self) -> None:
        if self.active:
            self.logger.info("Notification hidden", title=self.title)
        self.active = False
        self.title = DEFAULT_TITLE
