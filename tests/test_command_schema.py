"""
Unit Tests — Command Schema
============================
Keyword lookup and the mapping from commands to BugUpdates.
"""
import pytest

from bugmail.core.exceptions import CommandValidationError
from bugmail.models.bug_report import BugReport
from bugmail.models.bug_update import BugStatus, ReproLevel, repro_level_for
from bugmail.models.command import Command, build_update, parse_test_args
from bugmail.models.parsed_email import ParsedEmail


def _msg(command="", args="", **kw):
    fields = dict(
        sender="alice@example.com",
        bug_id="abc123",
        message_id="<m1@example.com>",
        link="https://groups.google.com/d/msgid/bugs/m1",
        cc=["bob@example.com"],
        command=command,
        command_args=args,
    )
    fields.update(kw)
    return ParsedEmail(**fields)


@pytest.mark.parametrize("keyword,expected", [
    ("", Command.UPDATE),
    ("upstream", Command.UPSTREAM),
    ("invalid", Command.INVALID),
    ("fix:", Command.FIX),
    ("dup:", Command.DUP),
    ("test:", Command.TEST),
    ("foo", Command.UNKNOWN),
    ("FIX:", Command.UNKNOWN),
    ("fix", Command.UNKNOWN),
])
def test_keyword_lookup(keyword, expected):
    assert Command.from_keyword(keyword) is expected


@pytest.mark.parametrize("keyword,status", [
    ("", BugStatus.UPDATE),
    ("upstream", BugStatus.UPSTREAM),
    ("invalid", BugStatus.INVALID),
])
def test_status_only_commands(keyword, status):
    cmd = build_update(_msg(keyword))
    assert cmd.status == status
    assert cmd.id == "abc123"
    assert cmd.ext_id == "<m1@example.com>"
    assert cmd.link == "https://groups.google.com/d/msgid/bugs/m1"
    assert cmd.cc == ["bob@example.com"]
    assert cmd.fix_commits == []


def test_fix():
    cmd = build_update(_msg("fix:", "mm: fix crash in foo"))
    assert cmd.status == BugStatus.OPEN
    assert cmd.fix_commits == ["mm: fix crash in foo"]


def test_fix_without_title():
    with pytest.raises(CommandValidationError) as exc:
        build_update(_msg("fix:", ""))
    assert str(exc.value) == "no commit title"


def test_dup():
    cmd = build_update(_msg("dup:", "BUG: other crash"))
    assert cmd.status == BugStatus.DUP
    assert cmd.dup_of == "BUG: other crash"


def test_dup_without_title():
    with pytest.raises(CommandValidationError) as exc:
        build_update(_msg("dup:", ""))
    assert str(exc.value) == "no dup title"


def test_unknown_command():
    with pytest.raises(CommandValidationError) as exc:
        build_update(_msg("foo", "bar"))
    assert 'unknown command "foo"' in str(exc.value)


def test_test_command_has_no_update():
    with pytest.raises(ValueError):
        build_update(_msg("test:", "repo branch"))


class TestTestArgs:

    def test_two_tokens(self):
        assert parse_test_args("repo1 branch1") == ("repo1", "branch1")

    @pytest.mark.parametrize("args,count", [
        ("", 1),
        ("repo1", 1),
        ("repo1  branch1", 3),
        ("a b c", 3),
    ])
    def test_wrong_count(self, args, count):
        with pytest.raises(CommandValidationError) as exc:
            parse_test_args(args)
        assert str(exc.value) == f"want 2 args (repo, branch), got {count}"


@pytest.mark.parametrize("syz,c,level", [
    (b"", b"", ReproLevel.NONE),
    (b"r0 = open()", b"", ReproLevel.SYZ),
    (b"", b"int main() {}", ReproLevel.C),
    (b"r0 = open()", b"int main() {}", ReproLevel.C),
])
def test_repro_level(syz, c, level):
    rep = BugReport(id="b1", repro_syz=syz, repro_c=c)
    assert repro_level_for(rep) == level
