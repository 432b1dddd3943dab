"""
Loop Guard
==========
Set of our own mailing-list addresses. A list we post to may echo our
report back, or deliver a reply twice; commands arriving from a list
address are ignored so they are never applied twice.

Built once from the reporting config and never mutated afterwards.
"""
import logging
from typing import Iterable

from bugmail.core.reporting_config import ReportingConfig
from bugmail.mail.addressing import canonical_email

logger = logging.getLogger(__name__)


class LoopGuard:

    def __init__(self, addresses: Iterable[str] = ()) -> None:
        self._lists = frozenset(canonical_email(addr) for addr in addresses)

    @classmethod
    def from_reporting(cls, config: ReportingConfig) -> "LoopGuard":
        guard = cls(cfg.email for cfg in config.email_configs())
        logger.info("Loop guard knows %d mailing list(s)", len(guard))
        return guard

    def is_mailing_list(self, address: str) -> bool:
        return canonical_email(address) in self._lists

    def __len__(self) -> int:
        return len(self._lists)
