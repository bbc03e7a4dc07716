"""`isoboot boot` and the getopt-style `run-iso` launcher."""

from __future__ import annotations

import sys
import textwrap

import scriptconfig as scfg

from ..errors import ConfigurationError
from ..launch import run_image
from ..options import LaunchOptions
from ._common import (
    _BaseCommand,
    _count_verbose,
    _load_cfg,
    _peek_verbosity,
    log,
    run_entry,
    setup_logging,
)

RUN_ISO_USAGE = textwrap.dedent(
    """
    Usage:
        run-iso [options]

    Options:
        -a              set accessibility support using brltty
        -b              set boot type to 'BIOS' (default)
        -d              set image type to hard disk instead of optical disc
        -h              print help
        -i [image]      image to boot into
        -s              use Secure Boot (only relevant when using UEFI)
        -u              set boot type to 'UEFI'
        -v              use VNC display (instead of default SDL)
        -c [image]      attach an additional optical disc image (e.g. for cloud-init)

    Long options of `isoboot boot` (--dry_run, --config, --verbose) are
    accepted as well.

    Example:
        Run an image using UEFI:
        $ run-iso -u -i archlinux-2024.05.01-x86_64.iso
    """
).lstrip()

_SHORT_FLAGS = {
    'a': ['--accessibility'],
    'b': ['--boot_type', 'bios'],
    'u': ['--boot_type', 'uefi'],
    's': ['--secure_boot'],
    'd': ['--media_type', 'disk'],
    'v': ['--display', 'vnc'],
}
_SHORT_OPTS = {
    'i': '--image',
    'c': '--cdrom',
}


class BootCLI(_BaseCommand):
    """Boot an ISO or raw disk image with QEMU using BIOS or UEFI."""

    image = scfg.Value('', help='Image to boot into.')
    cdrom = scfg.Value(
        '',
        help='Additional optical disc image to attach (e.g. a cloud-init seed).',
    )
    boot_type = scfg.Value(
        'bios', choices=['bios', 'uefi'], help='Firmware to boot with.'
    )
    media_type = scfg.Value(
        'optical',
        choices=['optical', 'disk'],
        help='Attach the image as an optical disc or as a hard disk.',
    )
    secure_boot = scfg.Value(
        False, isflag=True, help='Use Secure Boot (only relevant for UEFI).'
    )
    accessibility = scfg.Value(
        False, isflag=True, help='Attach a braille display using brltty.'
    )
    display = scfg.Value(
        'default',
        choices=['default', 'vnc'],
        help='Use the default display backend or a VNC listener on :0.',
    )
    dry_run = scfg.Value(
        False, isflag=True, help='Print the QEMU command without running it.'
    )

    @classmethod
    def main(cls, argv=True, **kwargs):
        args = cls.cli(argv=argv, data=kwargs, strict=True)
        cfg = _load_cfg(args.config)
        options = LaunchOptions.from_values(
            image=args.image,
            cdrom=args.cdrom,
            boot_type=args.boot_type,
            media_type=args.media_type,
            secure_boot=args.secure_boot,
            accessibility=args.accessibility,
            display=args.display,
        )
        log.debug('Launch options: {}', options)
        return run_image(options, cfg=cfg, dry_run=bool(args.dry_run))


def expand_short_flags(argv: list[str]) -> tuple[list[str], bool]:
    """
    Translate getopt-style ``run-iso`` flags into `isoboot boot` options.

    Returns the translated argv and whether help was requested; scanning
    stops at ``-h`` like getopts. Clustered flags (``-ua``) and attached values (``-ifoo.iso``) are supported.

    Example:
        >>> expand_short_flags(['-ua', '-i', 'x.iso'])
        (['--boot_type', 'uefi', '--accessibility', '--image', 'x.iso'], False)
    """
    out: list[str] = []
    idx = 0
    while idx < len(argv):
        item = argv[idx]
        idx += 1
        if item.startswith('--') or not item.startswith('-') or item == '-':
            out.append(item)
            continue
        letters = item[1:]
        pos = 0
        while pos < len(letters):
            ch = letters[pos]
            pos += 1
            if ch == 'h':
                return out, True
            elif ch in _SHORT_FLAGS:
                out.extend(_SHORT_FLAGS[ch])
            elif ch in _SHORT_OPTS:
                value = letters[pos:]
                if not value:
                    if idx >= len(argv):
                        raise ConfigurationError(
                            f'option requires an argument -- {ch}'
                        )
                    value = argv[idx]
                    idx += 1
                out.extend([_SHORT_OPTS[ch], value])
                break
            else:
                raise ConfigurationError(f'illegal option -- {ch}')
    return out, False


def run_iso_main(argv: list[str] | None = None) -> None:
    """Entry point for the ``run-iso`` console script."""
    if argv is None:
        argv = sys.argv[1:]
    if not argv:
        print(RUN_ISO_USAGE, end='')
        sys.exit(1)
    try:
        expanded, wants_help = expand_short_flags(argv)
    except ConfigurationError as ex:
        print(f'Error: {ex}', file=sys.stderr)
        print("Error: Wrong option. Try 'run-iso -h'.", file=sys.stderr)
        sys.exit(1)
    if wants_help:
        print(RUN_ISO_USAGE, end='')
        sys.exit(0)
    setup_logging(_count_verbose(expanded), _peek_verbosity(expanded))
    sys.exit(run_entry(BootCLI, expanded))
