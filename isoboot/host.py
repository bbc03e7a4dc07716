"""Host prerequisite checks for booting images and building seed images."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from loguru import logger

from .config import IsoBootConfig
from .util import which

log = logger

SEED_CMDS = ['cloud-localds', 'ssh-add']


def check_commands(
    cfg: Optional[IsoBootConfig] = None,
) -> tuple[list[str], list[str]]:
    """Return ``(missing_required, missing_optional)`` host commands."""
    cfg = cfg if cfg is not None else IsoBootConfig()
    required = [cfg.machine.qemu_binary]
    missing = [c for c in required if which(c) is None]
    missing_opt = [c for c in SEED_CMDS if which(c) is None]
    return missing, missing_opt


def firmware_status(cfg: Optional[IsoBootConfig] = None) -> dict[str, bool]:
    cfg = cfg if cfg is not None else IsoBootConfig()
    paths = [
        cfg.firmware.vars_path,
        cfg.firmware.code_path,
        cfg.firmware.secboot_code_path,
    ]
    status = {p: Path(p).is_file() for p in paths}
    for p, ok in status.items():
        log.debug('firmware {} present={}', p, ok)
    return status


def kvm_available() -> bool:
    return Path('/dev/kvm').exists()
