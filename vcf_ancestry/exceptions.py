"""
Exceptions Module
Error hierarchy for the ancestry estimation pipeline.
"""


class AncestryError(Exception):
    """Base class for all pipeline errors."""


class VCFDecodeError(AncestryError):
    """Raised when a variant-call buffer cannot be decoded to text."""


class MarkerPanelError(AncestryError):
    """Raised when a marker reference panel is malformed."""


class ConfigError(AncestryError):
    """Raised when analysis configuration values are invalid."""
