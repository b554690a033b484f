"""Exception types raised by the featured manager core and infrastructure."""

from __future__ import annotations


class FeaturedError(Exception):
    """Base class for all featured manager errors."""


class DocumentParseError(FeaturedError):
    """A canonical document or stored draft could not be parsed."""


class MissingReferenceError(FeaturedError):
    """Reset was requested before any document was imported."""


class ExportError(FeaturedError):
    """Serializing the document or building the image archive failed."""


class UnknownTileError(FeaturedError, KeyError):
    """A tile id outside the fixed T1..T9 set was requested."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""
