"""
Dependencies
============
Process-wide collaborators for the routers.

The reporting config, loop guard and mail transport are built once and
cached; the store client is opened per request and closed afterwards.
Tests replace any of these through app.dependency_overrides.
"""
from functools import lru_cache
from typing import AsyncIterator

from fastapi import Depends

from bugmail.core import config
from bugmail.core.reporting_config import ReportingConfig, load_reporting_config
from bugmail.mail.transport import MailTransport, SMTPTransport
from bugmail.services.loop_guard import LoopGuard
from bugmail.services.mailer import Mailer
from bugmail.services.store_client import DashboardStore


@lru_cache
def get_reporting_config() -> ReportingConfig:
    return load_reporting_config(config.REPORTING_CONFIG_PATH)


@lru_cache
def get_loop_guard() -> LoopGuard:
    return LoopGuard.from_reporting(get_reporting_config())


@lru_cache
def get_transport() -> MailTransport:
    return SMTPTransport(
        host=config.SMTP_HOST,
        port=config.SMTP_PORT,
        username=config.SMTP_USERNAME,
        password=config.SMTP_PASSWORD,
        use_tls=config.SMTP_USE_TLS,
        timeout=config.SMTP_TIMEOUT,
    )


def get_mailer(transport: MailTransport = Depends(get_transport)) -> Mailer:
    return Mailer(transport)


async def get_store() -> AsyncIterator[DashboardStore]:
    store = DashboardStore(config.STORE_URL, api_key=config.STORE_API_KEY, timeout=config.STORE_TIMEOUT)
    try:
        yield store
    finally:
        await store.aclose()
