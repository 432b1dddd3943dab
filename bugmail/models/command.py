"""
Command Schema
==============
Closed vocabulary of email commands and how each maps onto a BugUpdate.

    ""          → status UPDATE
    "upstream"  → status UPSTREAM
    "invalid"   → status INVALID
    "fix:"      → status OPEN, fix_commits=[args]   (args required)
    "dup:"      → status DUP, dup_of=args           (args required)
    "test:"     → test request side channel, no BugUpdate
    anything else → UNKNOWN, answered with 'unknown command "<keyword>"'

Keywords are matched exactly and case-sensitively.
"""
from enum import Enum
from typing import Tuple

from bugmail.core.exceptions import CommandValidationError
from .bug_update import BugStatus, BugUpdate
from .parsed_email import ParsedEmail


class Command(Enum):
    UPDATE = ""
    UPSTREAM = "upstream"
    INVALID = "invalid"
    FIX = "fix:"
    DUP = "dup:"
    TEST = "test:"
    UNKNOWN = None

    @classmethod
    def from_keyword(cls, keyword: str) -> "Command":
        if keyword is None:
            return cls.UNKNOWN
        try:
            return cls(keyword)
        except ValueError:
            return cls.UNKNOWN


_STATUS_ONLY = {
    Command.UPDATE: BugStatus.UPDATE,
    Command.UPSTREAM: BugStatus.UPSTREAM,
    Command.INVALID: BugStatus.INVALID,
}


def build_update(msg: ParsedEmail) -> BugUpdate:
    """
    Translate an inbound message into a BugUpdate.

    Raises
    ------
    CommandValidationError
        Missing arguments or an unknown keyword. The message text is meant
        to be sent back to the author verbatim.
    ValueError
        For "test:", which never produces a BugUpdate.
    """
    command = Command.from_keyword(msg.command)
    fields = dict(id=msg.bug_id, ext_id=msg.message_id, link=msg.link, cc=msg.cc)

    if command in _STATUS_ONLY:
        return BugUpdate(status=_STATUS_ONLY[command], **fields)
    if command is Command.FIX:
        if not msg.command_args:
            raise CommandValidationError("no commit title")
        return BugUpdate(status=BugStatus.OPEN, fix_commits=[msg.command_args], **fields)
    if command is Command.DUP:
        if not msg.command_args:
            raise CommandValidationError("no dup title")
        return BugUpdate(status=BugStatus.DUP, dup_of=msg.command_args, **fields)
    if command is Command.TEST:
        raise ValueError("test: requests do not produce a bug update")
    raise CommandValidationError(f"unknown command \"{msg.command}\"")


def parse_test_args(args: str) -> Tuple[str, str]:
    """Split "repo branch" on single spaces; exactly two tokens are accepted."""
    parts = args.split(" ")
    if len(parts) != 2:
        raise CommandValidationError(f"want 2 args (repo, branch), got {len(parts)}")
    return parts[0], parts[1]
