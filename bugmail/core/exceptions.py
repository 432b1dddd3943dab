"""
Exceptions
==========
Error taxonomy shared by the poll cycle and the inbound interpreter.

    ConfigError             — bad per-destination configuration (skip report)
    ParseError              — inbound message could not be read (no reply possible)
    CommandValidationError  — malformed command arguments (always answered)
    AddressError            — cannot build a routable sender address
    SendError               — transport failure, never retried in-process
    StoreError              — bug store call failed
    RenderError             — mail template failed to render

Only CommandValidationError text is ever shown to an email sender.
"""


class BugMailError(Exception):
    """Base class for all bugmail errors."""


class ConfigError(BugMailError):
    pass


class ParseError(BugMailError):
    pass


class CommandValidationError(BugMailError):
    """Raised for command-shape problems the sender can fix by resending."""


class AddressError(BugMailError):
    pass


class SendError(BugMailError):
    pass


class StoreError(BugMailError):
    pass


class RenderError(BugMailError):
    pass
