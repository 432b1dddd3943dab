"""
Parsed Email Model
==================
Result of reading one inbound message.

Fields:
    subject       — original subject, reused verbatim for replies
    sender        — From address (addr-spec only)
    cc            — To/Cc addresses minus the bot's own addresses
    message_id    — Message-ID header of the inbound mail
    bug_id        — id decoded from the tagged bot address ("" if absent)
    link          — discussion link found in the body ("" if absent)
    command       — command keyword ("" means plain status update)
    command_args  — rest of the command line, trimmed
    body          — text body
    patch         — first inline unified diff ("" if absent)
"""
from typing import List
from pydantic import BaseModel


class ParsedEmail(BaseModel):
    subject: str = ""
    sender: str
    cc: List[str] = []
    message_id: str = ""
    bug_id: str = ""
    link: str = ""
    command: str = ""
    command_args: str = ""
    body: str = ""
    patch: str = ""
