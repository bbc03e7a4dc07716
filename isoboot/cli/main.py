"""Top-level modal CLI wiring and logging setup."""

from __future__ import annotations

import sys

import scriptconfig as scfg

from ._common import _count_verbose, _peek_verbosity, log, setup_logging
from .boot import BootCLI
from .config import ConfigModalCLI
from .host import DoctorCLI
from .seed import SeedCLI


class IsoBootModalCLI(scfg.ModalCLI):
    """Boot ISO images under QEMU and build cloud-init seed images."""

    boot = BootCLI
    seed = SeedCLI
    doctor = DoctorCLI
    config = ConfigModalCLI


def main(argv: list[str] | None = None) -> None:
    if argv is None:
        argv = sys.argv[1:]
    setup_logging(_count_verbose(argv), _peek_verbosity(argv))

    try:
        rc = IsoBootModalCLI.main(argv=argv, _noexit=True)
    except Exception as ex:
        print(f'ERROR: {ex}', file=sys.stderr)
        log.error('Unhandled isoboot error: {}', ex)
        sys.exit(2)

    if any(flag in argv for flag in ('-h', '--help')):
        sys.exit(0)
    if isinstance(rc, int):
        sys.exit(rc)
    sys.exit(0)
