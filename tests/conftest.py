from __future__ import annotations

from pathlib import Path

import pytest
from loguru import logger

from isoboot.config import IsoBootConfig


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    # entry points add a stderr sink bound to the captured stream
    logger.remove()


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv('ISOBOOT_CONFIG', str(tmp_path / 'no-such-config.toml'))


@pytest.fixture
def image(tmp_path: Path) -> Path:
    p = tmp_path / 'disk.iso'
    p.write_bytes(b'\0' * 16)
    return p


@pytest.fixture
def firmware_cfg(tmp_path: Path) -> IsoBootConfig:
    fw = tmp_path / 'ovmf'
    fw.mkdir()
    for name in ('OVMF_VARS.fd', 'OVMF_CODE.fd', 'OVMF_CODE.secboot.fd'):
        (fw / name).write_bytes(name.encode())
    cfg = IsoBootConfig()
    cfg.firmware.vars_path = str(fw / 'OVMF_VARS.fd')
    cfg.firmware.code_path = str(fw / 'OVMF_CODE.fd')
    cfg.firmware.secboot_code_path = str(fw / 'OVMF_CODE.secboot.fd')
    return cfg
