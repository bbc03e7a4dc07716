"""Cloud-init NoCloud seed image built from the current user's SSH keys."""

from __future__ import annotations

import getpass
import os
import tempfile
from pathlib import Path
from typing import Sequence

from loguru import logger

from .errors import ConfigurationError, MissingSSHKeyError
from .util import run_cmd, which

log = logger


def current_user() -> str:
    return os.environ.get('USER') or getpass.getuser()


def _key_lines(text: str) -> list[str]:
    keys = []
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith('#'):
            continue
        keys.append(line)
    return keys


def agent_public_keys() -> list[str]:
    """Return the public keys currently loaded in the SSH agent."""
    if which('ssh-add') is None:
        raise MissingSSHKeyError('ssh-add not found; install openssh.')
    res = run_cmd(['ssh-add', '-L'], check=False, capture=True)
    keys = _key_lines(res.stdout) if res.code == 0 else []
    if not keys:
        detail = (res.stdout or res.stderr).strip() or f'exit code {res.code}'
        raise MissingSSHKeyError(
            f'No public key available from ssh-agent ({detail}). '
            'Add a key with ssh-add or pass --pubkey.'
        )
    return keys


def read_public_keys(path: str | Path) -> list[str]:
    p = Path(path).expanduser()
    if not p.is_file():
        raise MissingSSHKeyError(f'SSH public key file ({p}) does not exist.')
    keys = _key_lines(p.read_text(encoding='utf-8'))
    if not keys:
        raise MissingSSHKeyError(f'No SSH public keys found in {p}.')
    return keys


def render_user_data(user: str, keys: Sequence[str]) -> str:
    if not user:
        raise ConfigurationError('User name can not be empty.')
    if not keys:
        raise MissingSSHKeyError('At least one SSH public key is required.')
    lines = [
        '#cloud-config',
        'users:',
        f'  - name: {user}',
        '    ssh_authorized_keys:',
    ]
    lines.extend(f'      - {key}' for key in keys)
    return '\n'.join(lines) + '\n'


def create_seed_iso(
    output: str | Path,
    user: str,
    keys: Sequence[str],
    *,
    dry_run: bool = False,
) -> Path:
    """
    Write user-data for ``user`` and pack it into ``output`` with cloud-localds.

    The user-data file only lives for the duration of the cloud-localds call.
    """
    output = Path(output)
    user_data = render_user_data(user, keys)
    if dry_run:
        log.info('DRYRUN: write user-data + cloud-localds {}', output)
        print(user_data, end='')
        return output
    if which('cloud-localds') is None:
        raise ConfigurationError(
            'cloud-localds not found; install cloud-image-utils.'
        )
    with tempfile.NamedTemporaryFile(
        'w', prefix='user-data.', delete=False, encoding='utf-8'
    ) as f:
        f.write(user_data)
        tmp = f.name
    try:
        log.debug('Wrote user-data to {}', tmp)
        run_cmd(['cloud-localds', str(output), tmp], check=True, capture=True)
    finally:
        os.unlink(tmp)
    log.info('Created seed image {} for user {}', output, user)
    return output
