"""
Assemble and run the QEMU command line for booting an image.

The argument order produced by :func:`build_qemu_args` is stable:

1. base machine flags (boot order, memory, keymap, name, SCSI controller)
2. the primary media device and drive
3. UEFI pflash firmware drives (UEFI only)
4. the braille accessibility chain (optional)
5. the secondary optical drive (optional)
6. display flags
7. fixed tail flags (sound, user networking, KVM, serial, no-reboot)
"""

from __future__ import annotations

import contextlib
import shutil
import signal
import tempfile
import threading
from pathlib import Path
from typing import Iterator, Optional

from loguru import logger

from .config import IsoBootConfig
from .errors import FirmwareMissingError, IsoBootError
from .options import (
    BootType,
    DisplayMode,
    LaunchOptions,
    MediaType,
    check_image,
)
from .util import run_cmd, shell_join, which

log = logger

SCSI_BUS = 'scsi0.0'
VNC_LISTEN = 'vnc=0.0.0.0:0,vnc=[::]:0'
_CLEANUP_SIGNALS = (signal.SIGTERM, signal.SIGHUP)


def _raise_exit(signum, frame):
    raise SystemExit(128 + signum)


@contextlib.contextmanager
def working_directory(prefix: str = 'isoboot.') -> Iterator[Path]:
    """
    Temporary directory removed on every way out of the block.

    SIGTERM and SIGHUP are turned into ``SystemExit`` while the block runs so
    that the directory is also removed when the process is told to stop.
    """
    previous = {}
    if threading.current_thread() is threading.main_thread():
        for signum in _CLEANUP_SIGNALS:
            previous[signum] = signal.signal(signum, _raise_exit)
    try:
        with tempfile.TemporaryDirectory(prefix=prefix) as tmp:
            log.debug('Created working directory {}', tmp)
            yield Path(tmp)
        log.debug('Removed working directory {}', tmp)
    finally:
        for signum, handler in previous.items():
            signal.signal(signum, handler)


def copy_ovmf_vars(cfg: IsoBootConfig, working_dir: Path) -> Path:
    src = Path(cfg.firmware.vars_path)
    if not src.is_file():
        raise FirmwareMissingError(
            f'{src.name} not found ({src}). Install edk2-ovmf.'
        )
    dst = Path(working_dir) / src.name
    shutil.copyfile(src, dst)
    log.info('Copied firmware variables {} -> {}', src, dst)
    return dst


def _ovmf_code(cfg: IsoBootConfig, secure_boot: bool) -> Path:
    if secure_boot:
        log.info('Using Secure Boot')
        code = Path(cfg.firmware.secboot_code_path)
    else:
        code = Path(cfg.firmware.code_path)
    if not code.is_file():
        raise FirmwareMissingError(
            f'{code.name} not found ({code}). Install edk2-ovmf.'
        )
    return code


def _base_args(cfg: IsoBootConfig) -> list[str]:
    mem = int(cfg.machine.memory_mb)
    name = cfg.machine.name
    return [
        '-boot', 'order=d,menu=on,reboot-timeout=5000',
        '-m', f'size={mem},slots=0,maxmem={mem * 1024 * 1024}',
        '-k', cfg.machine.keyboard,
        '-name', f'{name},process={name}_0',
        '-device', 'virtio-scsi-pci,id=scsi0',
    ]


def _media_args(media_type: MediaType, image: str) -> list[str]:
    if media_type is MediaType.OPTICAL:
        device, drive, media = 'scsi-cd', 'cdrom0', 'cdrom'
    elif media_type is MediaType.DISK:
        device, drive, media = 'scsi-hd', 'hd0', 'disk'
    else:
        raise AssertionError(f'unhandled media type {media_type!r}')
    return [
        '-device', f'{device},bus={SCSI_BUS},drive={drive}',
        '-drive',
        f'id={drive},if=none,format=raw,media={media},readonly=on,file={image}',
    ]


def _uefi_args(
    cfg: IsoBootConfig, secure_boot: bool, working_dir: Path
) -> list[str]:
    ovmf_vars = copy_ovmf_vars(cfg, working_dir)
    ovmf_code = _ovmf_code(cfg, secure_boot)
    secure = 'on' if secure_boot else 'off'
    return [
        '-drive', f'if=pflash,format=raw,unit=0,file={ovmf_code},readonly=on',
        '-drive', f'if=pflash,format=raw,unit=1,file={ovmf_vars}',
        '-global', f'driver=cfi.pflash01,property=secure,value={secure}',
    ]


def _accessibility_args() -> list[str]:
    return [
        '-chardev', 'braille,id=brltty',
        '-device', 'usb-braille,id=usbbrl,chardev=brltty',
    ]


def _secondary_args(path: str) -> list[str]:
    check_image(path)
    return [
        '-device', f'scsi-cd,bus={SCSI_BUS},drive=cdrom1',
        '-drive',
        f'id=cdrom1,if=none,format=raw,media=cdrom,readonly=on,file={path}',
    ]


def _display_args(cfg: IsoBootConfig, mode: DisplayMode) -> list[str]:
    if mode is DisplayMode.VNC:
        return ['-display', 'none', '-vga', 'virtio', '-vnc', VNC_LISTEN]
    elif mode is DisplayMode.DEFAULT:
        return ['-display', cfg.machine.display_backend, '-vga', 'virtio']
    raise AssertionError(f'unhandled display mode {mode!r}')


def _tail_args(cfg: IsoBootConfig) -> list[str]:
    host_port = int(cfg.machine.ssh_host_port)
    guest_port = int(cfg.machine.ssh_guest_port)
    return [
        '-device', 'ich9-intel-hda',
        '-device', 'virtio-net-pci,romfile=,netdev=net0',
        '-netdev', f'user,id=net0,hostfwd=tcp::{host_port}-:{guest_port}',
        '-global', 'ICH9-LPC.disable_s3=1',
        '-enable-kvm',
        '-serial', 'stdio',
        '-no-reboot',
    ]


def build_qemu_args(
    options: LaunchOptions,
    *,
    working_dir: Path,
    cfg: Optional[IsoBootConfig] = None,
) -> list[str]:
    """
    Validate ``options`` and return the emulator arguments (without binary).

    Raises:
        ConfigurationError: the primary or secondary image is empty/missing.
        FirmwareMissingError: UEFI was requested but OVMF files are absent.
    """
    cfg = cfg if cfg is not None else IsoBootConfig()
    check_image(options.image_path)
    if options.secure_boot and options.boot_type is not BootType.UEFI:
        log.warning('Secure Boot only applies to UEFI boot; ignoring it for BIOS')

    args = _base_args(cfg)
    args += _media_args(options.media_type, options.image_path)
    if options.boot_type is BootType.UEFI:
        args += _uefi_args(cfg, options.secure_boot_effective, Path(working_dir))
    if options.accessibility:
        args += _accessibility_args()
    if options.secondary_image_path:
        args += _secondary_args(options.secondary_image_path)
    args += _display_args(cfg, options.display_mode)
    args += _tail_args(cfg)
    return args


build = build_qemu_args


def qemu_command(
    options: LaunchOptions,
    *,
    working_dir: Path,
    cfg: Optional[IsoBootConfig] = None,
) -> list[str]:
    cfg = cfg if cfg is not None else IsoBootConfig()
    args = build_qemu_args(options, working_dir=working_dir, cfg=cfg)
    return [cfg.machine.qemu_binary, *args]


def run_image(
    options: LaunchOptions,
    *,
    cfg: Optional[IsoBootConfig] = None,
    dry_run: bool = False,
) -> int:
    """Boot ``options.image_path`` in the foreground and return QEMU's exit code."""
    cfg = cfg if cfg is not None else IsoBootConfig()
    with working_directory() as working_dir:
        cmd = qemu_command(options, working_dir=working_dir, cfg=cfg)
        if dry_run:
            log.info('DRYRUN: {}', shell_join(cmd))
            print(shell_join(cmd))
            return 0
        if which(cmd[0]) is None:
            raise IsoBootError(f'{cmd[0]} not found. Install qemu.')
        log.info('Booting {} ({})', options.image_path, options.boot_type.value)
        res = run_cmd(cmd, check=False, capture=False)
        if res.code != 0:
            log.warning('{} exited with code {}', cmd[0], res.code)
        return res.code
