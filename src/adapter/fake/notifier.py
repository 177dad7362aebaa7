"""In-memory implementation of NotifierPort for testing."""

from domain.model.notification import NotificationChannel, NotificationMessage


class FakeNotifier:
    def __init__(self, fail: bool = False):
        self.sent: list[tuple[NotificationChannel, NotificationMessage]] = []
        self.fail = fail

    async def send(self, channel: NotificationChannel, message: NotificationMessage) -> bool:
        if self.fail:
            raise RuntimeError("notifier unavailable")
        self.sent.append((channel, message))
        return True

    @property
    def titles(self) -> list[str]:
        return [m.embeds[0].title for _, m in self.sent if m.embeds]
