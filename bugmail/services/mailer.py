"""
Mailer
======
Builds every outbound message (reports, replies, rejections) and hands it
to the injected MailTransport.

Threading:
    - Reports reply to the bug's external thread id when it has one.
    - Replies go to the original sender, CC the original CC list, keep the
      original subject and set In-Reply-To to the original Message-ID.
    - Every sender address carries the bug id (see mail.addressing), so
      answers route back to the right bug with no lookup.
"""
import logging
from typing import List, Optional

from bugmail.core import config
from bugmail.mail.addressing import add_addr_context
from bugmail.mail.renderer import MailRenderer, ReportData
from bugmail.mail.transport import MailTransport
from bugmail.models.outgoing_email import Attachment, OutgoingEmail
from bugmail.models.parsed_email import ParsedEmail
from bugmail.parser.email_parser import form_reply

logger = logging.getLogger(__name__)


class Mailer:

    def __init__(
        self,
        transport: MailTransport,
        renderer: Optional[MailRenderer] = None,
        from_address: Optional[str] = None,
    ) -> None:
        self.transport = transport
        self.renderer = renderer or MailRenderer()
        self.from_address = from_address or config.from_addr()

    def sender_for(self, bug_id: str) -> str:
        """Bot address tagged with ``bug_id``. Raises AddressError."""
        return add_addr_context(self.from_address, bug_id)

    async def send_report(
        self,
        bug_id: str,
        title: str,
        to: List[str],
        ext_id: str,
        attachments: List[Attachment],
        template: str,
        data: ReportData,
    ) -> None:
        sender = self.sender_for(bug_id)
        body = self.renderer.render(template, data)
        logger.info("sending email %r to %s", title, to)
        await self.transport.send(OutgoingEmail(
            sender=sender,
            to=to,
            subject=title,
            body=body,
            attachments=attachments,
            in_reply_to=ext_id,
        ))

    async def reply_to(
        self, msg: ParsedEmail, reply: str, attachment: Optional[Attachment] = None
    ) -> None:
        sender = self.sender_for(msg.bug_id)
        logger.info(
            "sending reply: to=%r cc=%r subject=%r reply=%r",
            msg.sender, msg.cc, msg.subject, reply,
        )
        await self.transport.send(OutgoingEmail(
            sender=sender,
            to=[msg.sender],
            cc=msg.cc,
            subject=msg.subject,
            body=form_reply(msg.body, reply),
            attachments=[attachment] if attachment else [],
            in_reply_to=msg.message_id,
        ))
