"""Tests for launch options and image checks."""

from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest

from isoboot.errors import ConfigurationError
from isoboot.options import (
    BootType,
    DisplayMode,
    LaunchOptions,
    MediaType,
    check_image,
    coerce_boot_type,
)


def test_check_image_empty() -> None:
    with pytest.raises(ConfigurationError, match='can not be empty'):
        check_image('')


def test_check_image_missing(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match='does not exist'):
        check_image(str(tmp_path / 'nope.iso'))


def test_check_image_directory_is_not_an_image(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        check_image(str(tmp_path))


def test_check_image_ok(image: Path) -> None:
    assert check_image(str(image)) == image


def test_defaults() -> None:
    opts = LaunchOptions(image_path='disk.iso')
    assert opts.boot_type is BootType.BIOS
    assert opts.media_type is MediaType.OPTICAL
    assert opts.display_mode is DisplayMode.DEFAULT
    assert opts.secure_boot is False
    assert opts.accessibility is False
    assert opts.secondary_image_path == ''


def test_options_are_frozen() -> None:
    opts = LaunchOptions(image_path='disk.iso')
    with pytest.raises(dataclasses.FrozenInstanceError):
        opts.image_path = 'other.iso'


def test_from_values_coerces_strings() -> None:
    opts = LaunchOptions.from_values(
        image='a.iso',
        cdrom=None,
        boot_type='UEFI',
        media_type='disk',
        secure_boot=True,
        display='vnc',
    )
    assert opts.boot_type is BootType.UEFI
    assert opts.media_type is MediaType.DISK
    assert opts.display_mode is DisplayMode.VNC
    assert opts.secondary_image_path == ''
    assert opts.secure_boot_effective is True


def test_secure_boot_not_effective_for_bios() -> None:
    opts = LaunchOptions(image_path='a.iso', secure_boot=True)
    assert opts.secure_boot_effective is False


def test_coerce_rejects_unknown() -> None:
    assert coerce_boot_type(BootType.UEFI) is BootType.UEFI
    with pytest.raises(ConfigurationError, match='expected one of: bios, uefi'):
        coerce_boot_type('coreboot')
