"""
Command Interpreter
===================
Handles one inbound email end to end.

Steps:
    1. Parse the raw message                  (ParseError → log, stop)
    2. Loop guard: a command sent from one of our own mailing lists is a
       duplicate delivery and is ignored silently
    3. "test:" goes to the test-request side channel; every other keyword
       becomes a BugUpdate applied by the store
    4. A rejection from the store is answered with its reason; internal
       store errors are only logged

Contract:
    - handle() never raises.
    - Only command-shape problems and store rejection reasons are ever
      sent back to the author; transport and store failures stay in logs.
    - No local deduplication beyond the loop guard. The store decides
      whether a repeated command is a no-op.
"""
import logging
from typing import Optional

from bugmail.core import config
from bugmail.core.exceptions import BugMailError, CommandValidationError, ParseError, StoreError
from bugmail.mail.addressing import canonical_email
from bugmail.models.command import Command, build_update, parse_test_args
from bugmail.models.parsed_email import ParsedEmail
from bugmail.parser.email_parser import parse_incoming
from bugmail.services.loop_guard import LoopGuard
from bugmail.services.mailer import Mailer
from bugmail.services.store_client import DashboardStore

logger = logging.getLogger(__name__)

TESTING_DISABLED_REPLY = "testing is experimental"


class CommandInterpreter:

    def __init__(
        self,
        store: DashboardStore,
        mailer: Mailer,
        loop_guard: LoopGuard,
        testing_enabled: Optional[bool] = None,
        own_address: Optional[str] = None,
        command_prefix: Optional[str] = None,
    ) -> None:
        self.store = store
        self.mailer = mailer
        self.loop_guard = loop_guard
        self.testing_enabled = config.ENABLE_TEST_COMMAND if testing_enabled is None else testing_enabled
        self.own_address = own_address or config.MAIL_BOT_ADDRESS
        self.command_prefix = command_prefix or config.command_prefix()

    async def handle(self, raw: bytes) -> None:
        try:
            await self._handle(raw)
        except BugMailError as e:
            logger.error("incoming email failed: %s", e)
        except Exception as e:
            logger.error("incoming email failed unexpectedly: %s", e, exc_info=True)

    async def _handle(self, raw: bytes) -> None:
        try:
            msg = parse_incoming(raw, self.own_address, self.command_prefix)
        except ParseError as e:
            logger.error("failed to parse incoming email: %s", e)
            return
        logger.info(
            "received email: subject %r, from %r, cc %r, msg %r, bug %r, cmd %r, link %r",
            msg.subject, msg.sender, msg.cc, msg.message_id, msg.bug_id, msg.command, msg.link,
        )

        # We do not know the bug's reporting route yet, so any of our lists counts.
        if msg.command and self.loop_guard.is_mailing_list(msg.sender):
            logger.info("duplicate email from mailing list, ignoring")
            return

        if Command.from_keyword(msg.command) is Command.TEST:
            await self._handle_test(msg)
            return

        try:
            cmd = build_update(msg)
        except CommandValidationError as e:
            await self._reply(msg, str(e))
            return

        try:
            result = await self.store.update_bug(cmd)
        except StoreError as e:
            logger.error("bug %s update failed: %s", msg.bug_id, e)
            return
        if not result.ok and result.reason:
            await self._reply(msg, result.reason)

    async def _handle_test(self, msg: ParsedEmail) -> None:
        if not self.testing_enabled:
            await self._reply(msg, TESTING_DISABLED_REPLY)
            return
        try:
            repo, branch = parse_test_args(msg.command_args)
        except CommandValidationError as e:
            await self._reply(msg, str(e))
            return

        logger.info("test request: bug %s repo %s branch %s", msg.bug_id, repo, branch)
        try:
            reply = await self.store.test_request(
                msg.bug_id, canonical_email(msg.sender), msg.message_id, msg.patch, repo, branch,
            )
        except StoreError as e:
            logger.error("test request for bug %s failed: %s", msg.bug_id, e)
            return
        if reply:
            await self._reply(msg, reply)

    async def _reply(self, msg: ParsedEmail, reply: str) -> None:
        try:
            await self.mailer.reply_to(msg, reply)
        except BugMailError as e:
            logger.error("failed to reply to %r: %s", msg.message_id, e)
