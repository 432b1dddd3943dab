"""
Unit Tests — Address Helpers
=============================
Canonicalization, bug-id tagging and list merging.
"""
import pytest

from bugmail.core.exceptions import AddressError
from bugmail.mail.addressing import (
    add_addr_context,
    canonical_email,
    merge_email_lists,
    remove_addr_context,
)

BOT = "\"bugbot\" <bot@bugs.example.com>"


class TestCanonicalEmail:

    def test_drops_display_name_and_case(self):
        assert canonical_email("\"Bugs\" <Bugs@Lists.Example.org>") == "bugs@lists.example.org"

    def test_drops_context(self):
        assert canonical_email("bot+4f3c@bugs.example.com") == "bot@bugs.example.com"

    def test_trims_whitespace(self):
        assert canonical_email("  Foo@Bar.org ") == "foo@bar.org"

    def test_unparseable_only_trimmed_and_lowercased(self):
        assert canonical_email("  NoAtSign ") == "noatsign"

    def test_same_mailbox_same_result(self):
        a = canonical_email("Alice <ALICE@example.com>")
        b = canonical_email("alice@example.com")
        assert a == b


class TestAddrContext:

    def test_embeds_bug_id(self):
        assert add_addr_context(BOT, "4f3c9a") == "\"bugbot\" <bot+4f3c9a@bugs.example.com>"

    def test_plain_address(self):
        assert add_addr_context("bot@bugs.example.com", "x1") == "bot+x1@bugs.example.com"

    def test_empty_context_keeps_address(self):
        assert add_addr_context(BOT, "") == BOT

    @pytest.mark.parametrize("context", ["has space", "a+b", "a<b", "a@b", "a\"b"])
    def test_illegal_context_rejected(self, context):
        with pytest.raises(AddressError):
            add_addr_context(BOT, context)

    def test_unparseable_base_rejected(self):
        with pytest.raises(AddressError):
            add_addr_context("nobody", "abc")

    def test_remove_is_inverse(self):
        tagged = add_addr_context(BOT, "deadbeef")
        addr, context = remove_addr_context(tagged)
        assert context == "deadbeef"
        assert addr == BOT

    def test_remove_without_context(self):
        assert remove_addr_context("bot@bugs.example.com") == ("bot@bugs.example.com", "")


class TestMergeEmailLists:

    def test_dedup_case_insensitive_keeps_first(self):
        merged = merge_email_lists(["list@x.org", "a@x.org", "b@x.org"], ["A@X.org", "c@x.org"])
        assert merged == ["list@x.org", "a@x.org", "b@x.org", "c@x.org"]

    def test_primary_never_demoted(self):
        merged = merge_email_lists(["list@x.org"], ["z@x.org", "LIST@x.org"])
        assert merged[0] == "list@x.org"
        assert len(merged) == 2

    def test_skips_garbage_and_long(self):
        long_addr = "a" * 1001 + "@x.org"
        assert merge_email_lists(["", "nobody", long_addr, "ok@x.org"]) == ["ok@x.org"]

    def test_cap(self):
        many = [f"user{i}@x.org" for i in range(80)]
        merged = merge_email_lists(["list@x.org"], many)
        assert len(merged) == 50
        assert merged[0] == "list@x.org"

    def test_none_list(self):
        assert merge_email_lists(["a@x.org"], None) == ["a@x.org"]
