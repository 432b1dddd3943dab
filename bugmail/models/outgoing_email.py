"""
Outgoing Email Model
Transport-neutral description of one message handed to a MailTransport.
"""
from typing import List
from pydantic import BaseModel


class Attachment(BaseModel):
    name: str
    data: bytes


class OutgoingEmail(BaseModel):
    sender: str
    to: List[str]
    cc: List[str] = []
    subject: str = ""
    body: str = ""
    attachments: List[Attachment] = []
    in_reply_to: str = ""
