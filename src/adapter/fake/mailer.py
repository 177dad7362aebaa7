"""In-memory implementation of MailerPort for testing."""

from domain.model.delivery import DeliveryResult


class FakeMailer:
    def __init__(self, fail: bool = False, reject: str | None = None):
        self.sent: list[dict] = []
        self.fail = fail
        self.reject = reject

    async def send_html(self, to: str, subject: str, html: str) -> DeliveryResult:
        return self._record({'to': to, 'subject': subject, 'html': html})

    async def send_template(self, to: str, template_id: str, variables: dict[str, str]) -> DeliveryResult:
        return self._record({'to': to, 'template_id': template_id, 'variables': variables})

    def _record(self, email: dict) -> DeliveryResult:
        if self.fail:
            raise RuntimeError("mailer unavailable")
        if self.reject:
            return DeliveryResult.failed(self.reject)
        self.sent.append(email)
        return DeliveryResult(success=True, id=f"email-{len(self.sent)}")
