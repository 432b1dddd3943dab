"""
Email Config Model
==================
Per-destination configuration of an email reporting route.

The serialized form travels with every BugReport. The mutually exclusive
moderation / mail_maintainers flags are checked once, when the reporting
routes are loaded (see bugmail.core.reporting_config); per-report
deserialization checks the shape and the destination address.
"""
from email.utils import getaddresses

from pydantic import BaseModel, ValidationError

from bugmail.core.constants import EMAIL_TYPE
from bugmail.core.exceptions import ConfigError


class EmailConfig(BaseModel):
    email: str
    moderation: bool = False
    mail_maintainers: bool = False

    @property
    def type(self) -> str:
        return EMAIL_TYPE

    @property
    def need_maintainers(self) -> bool:
        return self.mail_maintainers

    def check_address(self) -> None:
        parsed = getaddresses([self.email])
        if len(parsed) != 1 or "@" not in parsed[0][1]:
            raise ConfigError(f"bad email address {self.email!r}")

    def check(self) -> None:
        """Raise ConfigError if the route can never produce a valid email."""
        self.check_address()
        if self.moderation and self.mail_maintainers:
            raise ConfigError("both moderation and mail_maintainers set")

    @classmethod
    def from_blob(cls, blob: bytes) -> "EmailConfig":
        try:
            cfg = cls.model_validate_json(blob)
        except ValidationError as e:
            raise ConfigError(f"failed to unmarshal email config: {e}") from e
        cfg.check_address()
        return cfg
