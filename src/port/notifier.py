"""Port definition for chat notifications."""

from typing import Protocol

from domain.model.notification import NotificationChannel, NotificationMessage


class NotifierPort(Protocol):
    async def send(self, channel: NotificationChannel, message: NotificationMessage) -> bool: ...
