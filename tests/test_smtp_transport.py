import asyncio
import pytest
from unittest.mock import AsyncMock, patch

import aiosmtplib

from bugmail.core.exceptions import SendError
from bugmail.mail.transport import SMTPTransport, build_message
from bugmail.models.outgoing_email import Attachment, OutgoingEmail


def _email(**kw):
    fields = dict(
        sender="\"bugbot\" <bot+b1@bugs.example.com>",
        to=["bugs@lists.example.org", "a@x.org"],
        cc=["bob@example.com"],
        subject="KASAN: use-after-free in foo",
        body="crash report\n",
        attachments=[
            Attachment(name="config.txt", data=b"CONFIG_KASAN=y\n"),
            Attachment(name="repro.c", data=b"int main() {}\n"),
        ],
        in_reply_to="<first@bugs.example.com>",
    )
    fields.update(kw)
    return OutgoingEmail(**fields)


def test_build_message_headers():
    msg = build_message(_email())
    assert "bot+b1@bugs.example.com" in msg["From"]
    assert "bugs@lists.example.org" in msg["To"]
    assert "a@x.org" in msg["To"]
    assert msg["Cc"] == "bob@example.com"
    assert msg["Subject"] == "KASAN: use-after-free in foo"
    assert msg["In-Reply-To"] == "<first@bugs.example.com>"
    assert msg["Message-ID"]


def test_build_message_attachments():
    msg = build_message(_email())
    names = [part.get_filename() for part in msg.iter_attachments()]
    assert names == ["config.txt", "repro.c"]
    assert msg.get_body(preferencelist=("plain",)).get_content() == "crash report\n"


def test_build_message_without_thread():
    msg = build_message(_email(in_reply_to="", cc=[], attachments=[]))
    assert msg["In-Reply-To"] is None
    assert msg["Cc"] is None
    assert not msg.is_multipart()


def test_send_uses_configured_relay():
    transport = SMTPTransport("smtp.example.org", 2525, username="u", password="p", timeout=5)
    with patch("bugmail.mail.transport.aiosmtplib.send", new_callable=AsyncMock) as mock_send:
        asyncio.run(transport.send(_email()))
        mock_send.assert_awaited_once()
        kwargs = mock_send.call_args.kwargs
        assert kwargs["hostname"] == "smtp.example.org"
        assert kwargs["port"] == 2525
        assert kwargs["username"] == "u"
        assert kwargs["timeout"] == 5


@pytest.mark.parametrize("exc", [
    aiosmtplib.SMTPException("relay denied"),
    ConnectionRefusedError("refused"),
    asyncio.TimeoutError(),
])
def test_send_failure_raises_send_error(exc):
    transport = SMTPTransport("smtp.example.org", 25)
    with patch("bugmail.mail.transport.aiosmtplib.send", new_callable=AsyncMock, side_effect=exc):
        with pytest.raises(SendError):
            asyncio.run(transport.send(_email()))


def test_unbuildable_message_raises_send_error():
    transport = SMTPTransport("smtp.example.org", 25)
    with patch("bugmail.mail.transport.aiosmtplib.send", new_callable=AsyncMock) as mock_send:
        with pytest.raises(SendError, match="failed to build email"):
            asyncio.run(transport.send(_email(subject="KASAN: crash\nin foo")))
        mock_send.assert_not_awaited()
