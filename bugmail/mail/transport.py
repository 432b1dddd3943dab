"""
Mail Transport
==============
The single transmission primitive every outbound message funnels through.

MailTransport is the injectable seam: production code uses SMTPTransport,
tests swap in a recording double. Implementations raise SendError and
never retry; the caller decides what a failed send means.
"""
import asyncio
import logging
import mimetypes
from abc import ABC, abstractmethod
from email.message import EmailMessage
from email.utils import make_msgid
from typing import Optional

import aiosmtplib

from bugmail.core.exceptions import SendError
from bugmail.models.outgoing_email import OutgoingEmail

logger = logging.getLogger(__name__)


def build_message(email: OutgoingEmail) -> EmailMessage:
    """Translate an OutgoingEmail into a MIME message."""
    msg = EmailMessage()
    msg["From"] = email.sender
    msg["To"] = ", ".join(email.to)
    if email.cc:
        msg["Cc"] = ", ".join(email.cc)
    msg["Subject"] = email.subject
    msg["Message-ID"] = make_msgid()
    if email.in_reply_to:
        msg["In-Reply-To"] = email.in_reply_to
        msg["References"] = email.in_reply_to
    msg.set_content(email.body)
    for att in email.attachments:
        mime, _ = mimetypes.guess_type(att.name)
        maintype, subtype = (mime or "application/octet-stream").split("/", 1)
        msg.add_attachment(att.data, maintype=maintype, subtype=subtype, filename=att.name)
    return msg


class MailTransport(ABC):

    @abstractmethod
    async def send(self, email: OutgoingEmail) -> None:
        """Transmit one message. Raises SendError on failure."""


class SMTPTransport(MailTransport):
    """
    Sends through an SMTP relay with aiosmtplib.
    One connection per message; the relay owns queuing and retries.
    """

    def __init__(
        self,
        host: str,
        port: int,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_tls: bool = False,
        timeout: float = 30.0,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    async def send(self, email: OutgoingEmail) -> None:
        try:
            msg = build_message(email)
        except (ValueError, TypeError) as e:
            raise SendError(f"failed to build email: {e}") from e
        try:
            await aiosmtplib.send(
                msg,
                hostname=self.host,
                port=self.port,
                username=self.username,
                password=self.password,
                use_tls=self.use_tls,
                timeout=self.timeout,
            )
        except (aiosmtplib.SMTPException, OSError, asyncio.TimeoutError) as e:
            raise SendError(f"failed to send email: {e}") from e
        logger.debug("SMTP accepted %s via %s:%d", msg["Message-ID"], self.host, self.port)
