"""
Address Helpers
===============
Mailbox canonicalization, list merging, and bug-id tagging of the bot
address.

Tagging puts the bug id into the local part after a '+':

    "bugbot" <bot@bugs.example.com>  +  "4f3c9a"
        → "bugbot" <bot+4f3c9a@bugs.example.com>

A reply to that address carries the bug id back to us in its To/Cc
headers, so no lookup of the original message is needed.
"""
import re
from email.utils import parseaddr
from typing import Iterable, List, Tuple

from bugmail.core.constants import MAX_EMAIL_LEN, MAX_EMAILS
from bugmail.core.exceptions import AddressError

# dot-atom local part, '+' excluded so the context can be split back off
_CONTEXT_RE = re.compile(r"[A-Za-z0-9!#$%&'*/=?^_`{|}~-]+(?:\.[A-Za-z0-9!#$%&'*/=?^_`{|}~-]+)*")


def _parse_mailbox(address: str) -> Tuple[str, str]:
    name, addr = parseaddr(address)
    if not addr or "@" not in addr:
        raise AddressError(f"failed to parse {address!r} as email")
    return name, addr


def _format_mailbox(name: str, addr: str) -> str:
    if not name:
        return addr
    escaped = name.replace("\\", "\\\\").replace("\"", "\\\"")
    return f"\"{escaped}\" <{addr}>"


def canonical_email(address: str) -> str:
    """
    Return the comparable form of a mailbox: addr-spec only, '+context'
    dropped, lowercased. Unparseable input is only trimmed and lowercased.
    """
    try:
        _, addr = _parse_mailbox(address)
    except AddressError:
        return address.strip().lower()
    local, domain = addr.rsplit("@", 1)
    plus = local.find("+")
    if plus != -1:
        local = local[:plus]
    return f"{local}@{domain}".lower()


def add_addr_context(address: str, context: str) -> str:
    """Embed ``context`` into the local part of ``address``."""
    if not context:
        return address
    if not _CONTEXT_RE.fullmatch(context):
        raise AddressError(f"context {context!r} cannot be embedded into an address")
    name, addr = _parse_mailbox(address)
    local, domain = addr.rsplit("@", 1)
    return _format_mailbox(name, f"{local}+{context}@{domain}")


def remove_addr_context(address: str) -> Tuple[str, str]:
    """Inverse of add_addr_context: returns (address without context, context)."""
    name, addr = _parse_mailbox(address)
    local, domain = addr.rsplit("@", 1)
    plus = local.rfind("+")
    if plus == -1:
        return address, ""
    context = local[plus + 1:]
    return _format_mailbox(name, f"{local[:plus]}@{domain}"), context


def merge_email_lists(*lists: Iterable[str]) -> List[str]:
    """
    Merge address lists, keeping the first spelling and position of each
    mailbox. Matching is case-insensitive. Entries of earlier lists keep
    their place, so CC addresses never push out primary recipients.
    """
    seen = set()
    merged: List[str] = []
    for entries in lists:
        for entry in entries or []:
            _, addr = parseaddr(entry)
            if not addr or "@" not in addr or len(addr) > MAX_EMAIL_LEN:
                continue
            key = addr.lower()
            if key in seen:
                continue
            seen.add(key)
            merged.append(addr)
    return merged[:MAX_EMAILS]
