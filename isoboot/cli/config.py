from __future__ import annotations

import sys

import scriptconfig as scfg

from ..config import IsoBootConfig, dump_toml, save
from ._common import _BaseCommand, _cfg_path, _load_cfg


class InitCLI(_BaseCommand):
    """Write a config file populated with the default settings."""

    force = scfg.Value(
        False, isflag=True, help='Overwrite an existing config file.'
    )

    @classmethod
    def main(cls, argv=True, **kwargs):
        args = cls.cli(argv=argv, data=kwargs, strict=True)
        path = _cfg_path(args.config)
        if path.exists() and not args.force:
            print(f'Config already exists: {path}', file=sys.stderr)
            print('Use --force to overwrite it.', file=sys.stderr)
            return 2
        save(path, IsoBootConfig())
        print(f'Wrote config: {path}')
        return 0


class ShowCLI(_BaseCommand):
    """Print the effective settings as TOML."""

    @classmethod
    def main(cls, argv=True, **kwargs):
        args = cls.cli(argv=argv, data=kwargs, strict=True)
        cfg = _load_cfg(args.config)
        print(f'# {_cfg_path(args.config)}')
        print(dump_toml(cfg), end='')
        return 0


class ConfigModalCLI(scfg.ModalCLI):
    """Manage the isoboot settings file."""

    init = InitCLI
    show = ShowCLI
