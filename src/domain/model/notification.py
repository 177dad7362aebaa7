"""Chat notification messages (Discord webhook payload shape)."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

FOOTER_TEXT = "Tom's Trading Room"


class NotificationChannel(str, Enum):
    """Destination channel for a notification."""
    PAYMENTS = 'payments'
    MEMBERSHIPS = 'memberships'
    CHECKOUTS = 'checkouts'


class EmbedColor(int, Enum):
    SUCCESS = 0x10b981
    ERROR = 0xef4444
    WARNING = 0xf59e0b
    INFO = 0x3b82f6
    PENDING = 0x8b5cf6


@dataclass(frozen=True)
class EmbedField:
    name: str
    value: str
    inline: bool = True


@dataclass(frozen=True)
class Embed:
    title: str
    color: EmbedColor
    description: str | None = None
    fields: list[EmbedField] = field(default_factory=list)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    footer: str = FOOTER_TEXT

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            'title': self.title,
            'color': int(self.color),
            'timestamp': self.timestamp.isoformat().replace('+00:00', 'Z'),
            'footer': {'text': self.footer},
        }
        if self.description is not None:
            payload['description'] = self.description
        if self.fields:
            payload['fields'] = [
                {'name': f.name, 'value': f.value, 'inline': f.inline}
                for f in self.fields
            ]
        return payload


@dataclass(frozen=True)
class NotificationMessage:
    """``{content?, embeds?}`` body posted to a chat webhook."""
    content: str | None = None
    embeds: list[Embed] = field(default_factory=list)

    @classmethod
    def embed(
        cls,
        title: str,
        color: EmbedColor,
        description: str | None = None,
        fields: list[EmbedField] | None = None,
    ) -> 'NotificationMessage':
        return cls(embeds=[Embed(title=title, color=color, description=description, fields=fields or [])])

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        if self.content is not None:
            payload['content'] = self.content
        if self.embeds:
            payload['embeds'] = [e.to_dict() for e in self.embeds]
        return payload
