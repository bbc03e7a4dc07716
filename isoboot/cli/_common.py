from __future__ import annotations

import os
import sys
from pathlib import Path

import scriptconfig as scfg
from loguru import logger

from ..config import IsoBootConfig, default_config_path, load
from ..errors import ConfigurationError, IsoBootError
from ..util import CmdError

log = logger


class _BaseCommand(scfg.DataConfig):
    """Base options shared by all commands."""

    # `config` below is our own settings file, not scriptconfig's --config/--dump
    __special_options__ = False

    config = scfg.Value(
        None,
        help='Path to config TOML (default: $ISOBOOT_CONFIG or the user config dir).',
    )
    verbose = scfg.Value(
        0,
        isflag='counter',
        help='Increase verbosity (--verbose --verbose for debug output).',
    )


def _cfg_path(p: str | None) -> Path:
    if p:
        return Path(p).expanduser().resolve()
    return default_config_path()


def _load_cfg(config_path: str | None) -> IsoBootConfig:
    """Load settings; a missing default file means built-in defaults."""
    path = _cfg_path(config_path)
    if not path.exists():
        if config_path:
            raise ConfigurationError(
                f'Config not found: {path}. Run: isoboot config init --config {path}'
            )
        log.debug('No config at {}; using defaults', path)
        return IsoBootConfig()
    log.debug('Loading config {}', path)
    return load(path).expanded_paths()


def _peek_verbosity(argv: list[str]) -> int:
    config_value = None
    if '--config' in argv:
        try:
            config_value = argv[argv.index('--config') + 1]
        except IndexError:
            pass
    try:
        return _load_cfg(config_value).verbosity
    except Exception:
        return 1


def _count_verbose(argv: list[str]) -> int:
    return sum(1 for item in argv if item == '--verbose')


def setup_logging(args_verbose: int, cfg_verbosity: int) -> None:
    logger.remove()
    effective_verbosity = args_verbose if args_verbose > 0 else cfg_verbosity
    level = 'WARNING'
    if effective_verbosity == 1:
        level = 'INFO'
    elif effective_verbosity >= 2:
        level = 'DEBUG'
    colorize = sys.stderr.isatty() and os.getenv('NO_COLOR') is None
    logger.add(
        sys.stderr,
        level=level,
        colorize=colorize,
        format='<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>',
    )
    log.debug(
        'Logging configured at {} (effective_verbosity={}, colorize={})',
        level,
        effective_verbosity,
        colorize,
    )


def run_entry(cmd_cls, argv: list[str]) -> int:
    """
    Run a single command class the way the standalone scripts do.

    Domain and argument errors are reported as ``ERROR: <message>`` and
    mapped to exit code 1.
    """
    try:
        rc = cmd_cls.main(argv=argv)
    except (IsoBootError, CmdError) as ex:
        print(f'ERROR: {ex}', file=sys.stderr)
        log.debug('{} failed: {}', cmd_cls.__name__, ex)
        return 1
    except KeyboardInterrupt:
        log.info('Interrupted')
        return 130
    except SystemExit as ex:
        # argparse exits with 2 on bad arguments and 0 after --help
        if ex.code in (0, None):
            return 0
        return 1
    return 0 if rc is None else int(rc)
