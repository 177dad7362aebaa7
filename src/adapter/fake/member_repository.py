"""In-memory implementation of MemberRepository for testing."""

from dataclasses import replace
from datetime import datetime, timezone
from domain.model.member import EmailStatus, Member


class FakeMemberRepository:
    def __init__(self):
        self.store: dict[str, Member] = {}
        self.upsert_calls: list[dict] = []

    # ── write operations ─────────────────────────────────────

    def upsert(
        self,
        user_id: str,
        email: str,
        name: str | None = None,
        username: str | None = None,
    ) -> bool:
        if not user_id or not email:
            return False

        self.upsert_calls.append({'user_id': user_id, 'email': email, 'name': name, 'username': username})
        now = datetime.now(timezone.utc)
        existing = self.store.get(user_id)

        if existing is None:
            self.store[user_id] = Member(
                id=user_id,
                email=email,
                created_at=now,
                updated_at=now,
                name=name or None,
                username=username or None,
            )
            return True

        self.store[user_id] = replace(
            existing,
            email=email,
            name=name or existing.name,
            username=username or existing.username,
            updated_at=now,
        )
        return True

    def update_email_status(self, email: str, status: EmailStatus) -> bool:
        now = datetime.now(timezone.utc)
        for user_id, member in self.store.items():
            if member.email != email:
                continue
            unsubscribed_at = now if status == EmailStatus.UNSUBSCRIBED else member.unsubscribed_at
            self.store[user_id] = replace(
                member, email_status=status, updated_at=now, unsubscribed_at=unsubscribed_at,
            )
        return True

    # ── read operations ──────────────────────────────────────

    def get_by_id(self, user_id: str) -> Member | None:
        return self.store.get(user_id)

    def get_by_email(self, email: str) -> Member | None:
        for member in self.store.values():
            if member.email == email:
                return member
        return None

    def count_by_status(self, status: EmailStatus) -> int | None:
        return sum(1 for m in self.store.values() if m.email_status == status)
