"""Tool settings: firmware locations and machine defaults, stored as TOML."""

from __future__ import annotations

import os
import tomllib
from dataclasses import asdict, dataclass, field
from pathlib import Path

import ubelt as ub

from .util import expand

OVMF_DIR = '/usr/share/edk2-ovmf/x64'
CONFIG_ENV_VAR = 'ISOBOOT_CONFIG'


@dataclass
class FirmwareConfig:
    vars_path: str = f'{OVMF_DIR}/OVMF_VARS.fd'
    code_path: str = f'{OVMF_DIR}/OVMF_CODE.fd'
    secboot_code_path: str = f'{OVMF_DIR}/OVMF_CODE.secboot.fd'


@dataclass
class MachineConfig:
    qemu_binary: str = 'qemu-system-x86_64'
    memory_mb: int = 3072
    keyboard: str = 'en-us'
    name: str = 'archiso'
    display_backend: str = 'sdl'
    ssh_host_port: int = 60022
    ssh_guest_port: int = 22


@dataclass
class SeedConfig:
    output: str = 'cloud-init.iso'
    user: str = ''


@dataclass
class IsoBootConfig:
    firmware: FirmwareConfig = field(default_factory=FirmwareConfig)
    machine: MachineConfig = field(default_factory=MachineConfig)
    seed: SeedConfig = field(default_factory=SeedConfig)
    verbosity: int = 1

    def expanded_paths(self) -> 'IsoBootConfig':
        self.firmware.vars_path = expand(self.firmware.vars_path)
        self.firmware.code_path = expand(self.firmware.code_path)
        self.firmware.secboot_code_path = expand(self.firmware.secboot_code_path)
        self.seed.output = expand(self.seed.output)
        return self


_SECTIONS = ('firmware', 'machine', 'seed')


def default_config_path() -> Path:
    env = os.environ.get(CONFIG_ENV_VAR, '').strip()
    if env:
        return Path(expand(env))
    return Path(ub.Path.appdir('isoboot', type='config')) / 'config.toml'


def _toml_escape(s: str) -> str:
    return s.replace('\\', '\\\\').replace('"', '\\"')


def dump_toml(cfg: IsoBootConfig) -> str:
    d = asdict(cfg)
    lines: list[str] = []
    # top-level keys must precede the first table header
    if d.get('verbosity', 1) != 1:
        lines.append(f"verbosity = {d['verbosity']}")
        lines.append('')
    for section, body in d.items():
        if isinstance(body, dict):
            lines.append(f'[{section}]')
            for k, v in body.items():
                if isinstance(v, bool):
                    lines.append(f"{k} = {'true' if v else 'false'}")
                elif isinstance(v, int):
                    lines.append(f'{k} = {v}')
                else:
                    lines.append(f'{k} = "{_toml_escape(str(v))}"')
            lines.append('')
    return '\n'.join(lines).rstrip() + '\n'


def loads(text: str) -> IsoBootConfig:
    raw = tomllib.loads(text)
    cfg = IsoBootConfig()
    for section in _SECTIONS:
        if section in raw and isinstance(raw[section], dict):
            obj = getattr(cfg, section)
            for k, v in raw[section].items():
                if hasattr(obj, k):
                    setattr(obj, k, v)
    if 'verbosity' in raw:
        cfg.verbosity = int(raw['verbosity'])
    return cfg


def load(path: Path) -> IsoBootConfig:
    return loads(path.read_text(encoding='utf-8'))


def save(path: Path, cfg: IsoBootConfig) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_toml(cfg), encoding='utf-8')
