"""Tests for `isoboot config` and `isoboot doctor`."""

from __future__ import annotations

from pathlib import Path

from isoboot.cli.config import InitCLI, ShowCLI
from isoboot.cli.host import DoctorCLI
from isoboot.config import load


def test_config_init_and_show(capsys, tmp_path: Path) -> None:
    path = tmp_path / 'config.toml'
    assert InitCLI.main(argv=['--config', str(path)]) == 0
    assert load(path).machine.memory_mb == 3072
    assert InitCLI.main(argv=['--config', str(path)]) == 2
    assert InitCLI.main(argv=['--config', str(path), '--force']) == 0
    capsys.readouterr()
    assert ShowCLI.main(argv=['--config', str(path)]) == 0
    out = capsys.readouterr().out
    assert '[machine]' in out
    assert 'qemu_binary = "qemu-system-x86_64"' in out


def test_config_init_default_location(monkeypatch, tmp_path: Path) -> None:
    target = tmp_path / 'cfgdir' / 'config.toml'
    monkeypatch.setenv('ISOBOOT_CONFIG', str(target))
    assert InitCLI.main(argv=[]) == 0
    assert target.exists()


def test_doctor(monkeypatch, capsys) -> None:
    monkeypatch.setattr('isoboot.host.which', lambda cmd: None)
    assert DoctorCLI.main(argv=[]) == 2
    out = capsys.readouterr().out
    assert 'qemu-system-x86_64' in out
    assert 'OVMF_VARS.fd' in out

    monkeypatch.setattr('isoboot.host.which', lambda cmd: f'/usr/bin/{cmd}')
    assert DoctorCLI.main(argv=[]) == 0
