"""
GET /email_poll
Called by cron. Sends emails for new bugs and finished test jobs, if any.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse

from bugmail.agents.report_poller import ReportPoller
from bugmail.api.deps import get_mailer, get_store
from bugmail.core.exceptions import StoreError
from bugmail.services.mailer import Mailer
from bugmail.services.store_client import DashboardStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/email_poll", response_class=PlainTextResponse)
async def email_poll(
    store: DashboardStore = Depends(get_store),
    mailer: Mailer = Depends(get_mailer),
):
    poller = ReportPoller(store, mailer)
    try:
        await poller.poll_bugs()
    except StoreError as e:
        logger.error("bug poll failed: %s", e)
        raise HTTPException(status_code=500, detail=str(e))
    try:
        await poller.poll_jobs()
    except StoreError as e:
        logger.error("job poll failed: %s", e)
        raise HTTPException(status_code=500, detail=str(e))
    return "OK"
