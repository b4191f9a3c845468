"""Exceptions raised by md2print."""

from __future__ import annotations


class Md2PrintError(Exception):
    """Base class for all md2print errors."""


class UnsupportedConstructError(Md2PrintError):
    """The document uses a construct the renderer refuses to handle.

    Reference-style links, link definitions and MDX nodes abort the whole
    render instead of producing a silently wrong document.
    """

    def __init__(self, construct: str, reason: str) -> None:
        self.construct = construct
        super().__init__(f"Unsupported construct {construct!r}: {reason}")


class VaultError(Md2PrintError):
    """The vault configuration exists but could not be read."""
