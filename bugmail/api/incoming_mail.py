"""
POST /_ah/mail/{address}
Entry point for inbound email. The request body is the raw RFC 822 message.

Always answers 200: failures are logged, never surfaced, so a redelivery
by the mail gateway cannot produce duplicate error responses.
"""
import logging

from fastapi import APIRouter, Depends, Request, Response

from bugmail.agents.command_interpreter import CommandInterpreter
from bugmail.api.deps import get_loop_guard, get_mailer, get_store
from bugmail.services.loop_guard import LoopGuard
from bugmail.services.mailer import Mailer
from bugmail.services.store_client import DashboardStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/_ah/mail/{address}")
async def incoming_mail(
    address: str,
    request: Request,
    store: DashboardStore = Depends(get_store),
    mailer: Mailer = Depends(get_mailer),
    loop_guard: LoopGuard = Depends(get_loop_guard),
):
    raw = await request.body()
    logger.debug("incoming mail for %s (%d bytes)", address, len(raw))
    await CommandInterpreter(store, mailer, loop_guard).handle(raw)
    return Response(status_code=200)
