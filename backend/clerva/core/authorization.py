from dataclasses import dataclass, field

from clerva.core.config import Settings


@dataclass(frozen=True)
class AuthorizationPolicy:
    """Founder/admin allow-lists keyed by session email.

    Founders are always admins. Emails compare case-insensitively.
    """

    founder_emails: frozenset[str] = field(default_factory=frozenset)
    admin_emails: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_lists(cls, founders: list[str], admins: list[str]) -> "AuthorizationPolicy":
        return cls(
            founder_emails=frozenset(email.lower() for email in founders),
            admin_emails=frozenset(email.lower() for email in admins),
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "AuthorizationPolicy":
        return cls.from_lists(settings.founder_email_list, settings.admin_email_list)

    def is_founder(self, email: str | None) -> bool:
        if not email:
            return False
        return email.strip().lower() in self.founder_emails

    def is_admin(self, email: str | None) -> bool:
        if not email:
            return False
        return self.is_founder(email) or email.strip().lower() in self.admin_emails

    @property
    def notification_recipients(self) -> list[str]:
        return sorted(self.founder_emails | self.admin_emails)
