"""
Bug Update Model
================
State-transition request sent to the bug store, built fresh for every
successful report and for every inbound command. Never persisted here.
"""
from enum import Enum
from typing import List
from pydantic import BaseModel

from .bug_report import BugReport


class BugStatus(str, Enum):
    OPEN = "open"
    UPSTREAM = "upstream"
    INVALID = "invalid"
    DUP = "dup"
    UPDATE = "update"


class ReproLevel(str, Enum):
    NONE = "none"
    SYZ = "syz"
    C = "c"


class BugUpdate(BaseModel):
    id: str
    ext_id: str = ""
    status: BugStatus
    repro_level: ReproLevel = ReproLevel.NONE
    fix_commits: List[str] = []
    dup_of: str = ""
    link: str = ""
    cc: List[str] = []


class CommandResult(BaseModel):
    """Answer of the store to a BugUpdate."""
    ok: bool
    reason: str = ""


def repro_level_for(report: BugReport) -> ReproLevel:
    """C reproducer beats syz reproducer beats nothing."""
    if report.repro_c:
        return ReproLevel.C
    if report.repro_syz:
        return ReproLevel.SYZ
    return ReproLevel.NONE
