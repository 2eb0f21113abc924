import logging
from dataclasses import dataclass

from clerva.core.authorization import AuthorizationPolicy

logger = logging.getLogger(__name__)


@dataclass
class FeedbackNotice:
    feedback_id: int
    type: str
    content: str
    rating: int | None = None
    user_email: str | None = None
    user_id: int | None = None


class FeedbackNotifier:
    """Tells founders/admins about new feedback.

    Delivery is a log record; an SMTP or provider-backed notifier can
    subclass this and override ``send``.
    """

    def __init__(self, policy: AuthorizationPolicy):
        self.policy = policy

    def subject_for(self, notice: FeedbackNotice) -> str:
        return f"[Clerva] New {notice.type} feedback #{notice.feedback_id}"

    def send(self, recipients: list[str], subject: str, notice: FeedbackNotice) -> None:
        logger.info(
            "Feedback notification queued",
            extra={
                "to": recipients,
                "subject": subject,
                "content_length": len(notice.content),
            },
        )

    def notify(self, notice: FeedbackNotice) -> bool:
        recipients = self.policy.notification_recipients
        if not recipients:
            logger.warning("No founder/admin emails configured; feedback notification skipped")
            return False
        self.send(recipients, self.subject_for(notice), notice)
        return True
