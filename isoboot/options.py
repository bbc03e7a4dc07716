"""Launch options value object and image path validation."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path

from .errors import ConfigurationError


class BootType(str, enum.Enum):
    BIOS = 'bios'
    UEFI = 'uefi'


class MediaType(str, enum.Enum):
    OPTICAL = 'optical'
    DISK = 'disk'


class DisplayMode(str, enum.Enum):
    DEFAULT = 'default'
    VNC = 'vnc'


def _coerce(enum_cls, value, what: str):
    if isinstance(value, enum_cls):
        return value
    text = str(value or '').strip().lower()
    for member in enum_cls:
        if member.value == text:
            return member
    allowed = ', '.join(m.value for m in enum_cls)
    raise ConfigurationError(f'Invalid {what} {value!r}; expected one of: {allowed}')


def coerce_boot_type(value) -> BootType:
    return _coerce(BootType, value, 'boot type')


def coerce_media_type(value) -> MediaType:
    return _coerce(MediaType, value, 'media type')


def coerce_display_mode(value) -> DisplayMode:
    return _coerce(DisplayMode, value, 'display mode')


def check_image(path: str, *, label: str = 'Image') -> Path:
    """
    Ensure ``path`` names an existing file.

    Raises:
        ConfigurationError: if the path is empty or no such file exists.
    """
    if not path:
        raise ConfigurationError(f'{label} name can not be empty.')
    p = Path(path)
    if not p.is_file():
        raise ConfigurationError(f'{label} file ({path}) does not exist.')
    return p


@dataclass(frozen=True)
class LaunchOptions:
    image_path: str
    secondary_image_path: str = ''
    boot_type: BootType = BootType.BIOS
    media_type: MediaType = MediaType.OPTICAL
    secure_boot: bool = False
    accessibility: bool = False
    display_mode: DisplayMode = DisplayMode.DEFAULT

    @classmethod
    def from_values(
        cls,
        *,
        image: str | None,
        cdrom: str | None = '',
        boot_type='bios',
        media_type='optical',
        secure_boot: bool = False,
        accessibility: bool = False,
        display='default',
    ) -> 'LaunchOptions':
        """Build options from loosely typed CLI values."""
        return cls(
            image_path=str(image or ''),
            secondary_image_path=str(cdrom or ''),
            boot_type=coerce_boot_type(boot_type),
            media_type=coerce_media_type(media_type),
            secure_boot=bool(secure_boot),
            accessibility=bool(accessibility),
            display_mode=coerce_display_mode(display),
        )

    @property
    def secure_boot_effective(self) -> bool:
        return self.secure_boot and self.boot_type is BootType.UEFI
