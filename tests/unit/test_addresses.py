"""Tests for email address helpers."""

from gitfixes.addresses import email_domain, email_domain_in


def test_email_domain():
    assert email_domain("jane@SUSE.example") == "suse.example"
    assert email_domain("<jane@suse.example>") == "suse.example"
    assert email_domain("no-at-sign") == ""


def test_email_domain_in():
    assert email_domain_in("jane@suse.example", ["suse.example"])
    assert email_domain_in("jane@SUSE.example", ["suse.EXAMPLE"])
    assert not email_domain_in("jane@example.com", ["suse.example"])
    assert not email_domain_in("jane@mail.suse.example", ["suse.example"])
    assert not email_domain_in("no-at-sign", ["suse.example"])
    assert not email_domain_in("", [""])
