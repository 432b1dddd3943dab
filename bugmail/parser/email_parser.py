"""
Inbound Email Parser
====================
Converts a raw RFC 822 message into a ParsedEmail.

Pipeline:
    1. MIME-parse the raw bytes
    2. Extract From, To/Cc, Subject, Message-ID
    3. Recover the bug id from the tagged bot address in To/Cc
    4. Drop the bot's own addresses from the CC list
    5. Take the text/plain body
    6. Extract command keyword + args from the first "#<bot> " line
    7. Extract discussion link and inline patch from the body

Contract:
    - Raises ParseError only when no sender can be recovered or the
      message cannot be decoded; everything else degrades to empty fields.
"""
import email
import logging
import re
from email import policy
from email.utils import getaddresses
from typing import List, Tuple

from bugmail.core.config import command_prefix as default_command_prefix
from bugmail.core.exceptions import AddressError, ParseError
from bugmail.mail.addressing import canonical_email, merge_email_lists, remove_addr_context
from bugmail.models.parsed_email import ParsedEmail

logger = logging.getLogger(__name__)

# Google Groups footer appended to list deliveries
_GROUPS_LINK_RE = re.compile(
    r"\nTo view this discussion on the web visit (https://groups\.google\.com/.*?)\.(?:\r)?\n"
)

_PATCH_START = ("diff --git ", "--- a/", "Index: ")
_SIGNATURE = "-- "


def _header_addresses(msg, name: str) -> List[str]:
    values = [str(v) for v in msg.get_all(name, [])]
    return [addr for _, addr in getaddresses(values) if addr]


def _text_body(msg) -> str:
    part = msg.get_body(preferencelist=("plain",))
    if part is None:
        logger.debug("email has no text/plain part")
        return ""
    try:
        return part.get_content()
    except (LookupError, UnicodeError) as e:
        raise ParseError(f"failed to decode email body: {e}") from e


def extract_command(body: str, prefix: str) -> Tuple[str, str]:
    """
    Return (keyword, args) from the first line starting with ``prefix``.
    Quoted lines ("> #bot ...") never match.
    """
    for line in body.splitlines():
        if not line.startswith(prefix):
            continue
        rest = line[len(prefix):].strip()
        keyword, _, args = rest.partition(" ")
        return keyword, args.strip()
    return "", ""


def extract_link(body: str) -> str:
    match = _GROUPS_LINK_RE.search("\n" + body)
    return match.group(1) if match else ""


def extract_patch(body: str) -> str:
    """Return the first unified diff in the body, up to a signature line."""
    lines = body.splitlines()
    start = next((i for i, ln in enumerate(lines) if ln.startswith(_PATCH_START)), None)
    if start is None:
        return ""
    patch: List[str] = []
    for ln in lines[start:]:
        if ln == _SIGNATURE:
            break
        patch.append(ln)
    while patch and not patch[-1].strip():
        patch.pop()
    return "\n".join(patch) + "\n"


def parse_incoming(raw: bytes, own_address: str, command_prefix: str = "") -> ParsedEmail:
    """
    Parse one inbound message addressed to (a tagged form of) ``own_address``.

    Parameters
    ----------
    raw : bytes
        Raw message as delivered by the mail gateway.
    own_address : str
        The bot's untagged system address.
    command_prefix : str
        Line prefix that introduces a command, e.g. "#bugbot ".
        Defaults to the configured bot prefix.

    Returns
    -------
    ParsedEmail
    """
    try:
        msg = email.message_from_bytes(raw, policy=policy.default)
        senders = _header_addresses(msg, "From")
        recipients = _header_addresses(msg, "To") + _header_addresses(msg, "Cc")
        subject = str(msg.get("Subject", ""))
        message_id = str(msg.get("Message-ID", "")).strip()
    except (ValueError, TypeError, IndexError) as e:
        raise ParseError(f"failed to parse email: {e}") from e
    if not senders:
        raise ParseError("email has no From address")

    own = canonical_email(own_address)
    bug_id = ""
    cc: List[str] = []
    for addr in recipients:
        if canonical_email(addr) != own:
            cc.append(addr)
            continue
        try:
            _, context = remove_addr_context(addr)
        except AddressError:
            continue
        if context and not bug_id:
            bug_id = context

    body = _text_body(msg)
    command, args = extract_command(body, command_prefix or default_command_prefix())
    return ParsedEmail(
        subject=subject,
        sender=senders[0],
        cc=merge_email_lists(cc),
        message_id=message_id,
        bug_id=bug_id,
        link=extract_link(body),
        command=command,
        command_args=args,
        body=body,
        patch=extract_patch(body),
    )


def form_reply(body: str, reply: str, command_prefix: str = "") -> str:
    """
    Quote ``body`` line by line and put ``reply`` right after the quoted
    command line, or at the end when the body has no command.
    """
    out: List[str] = []
    prefix = command_prefix or default_command_prefix()
    replied = False
    for line in body.splitlines():
        out.append(f"> {line}")
        if not replied and line.startswith(prefix):
            out.extend(["", reply, ""])
            replied = True
    if not replied:
        out.extend(["", reply])
    return "\n".join(out) + "\n"
