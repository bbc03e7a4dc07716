"""Project-specific exception types."""

from __future__ import annotations


class IsoBootError(RuntimeError):
    """Base error for domain-level isoboot failures."""


class ConfigurationError(IsoBootError):
    """Raised when command-line input or an image path is unusable."""


class FirmwareMissingError(IsoBootError):
    """Raised when a UEFI firmware file required for booting is absent."""


class MissingSSHKeyError(ConfigurationError):
    """Raised when no SSH public key is available for the seed image."""
