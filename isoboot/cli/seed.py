"""`isoboot seed` and the `create-cloud-init` console script."""

from __future__ import annotations

import sys

import scriptconfig as scfg

from ..seed import (
    agent_public_keys,
    create_seed_iso,
    current_user,
    read_public_keys,
)
from ._common import (
    _BaseCommand,
    _count_verbose,
    _load_cfg,
    _peek_verbosity,
    run_entry,
    setup_logging,
)


class SeedCLI(_BaseCommand):
    """Create a cloud-init seed ISO from the current user and SSH public key."""

    output = scfg.Value(
        '', help='Seed image to write (default: seed.output from config).'
    )
    user = scfg.Value(
        '', help='Guest user to create (default: the current user).'
    )
    pubkey = scfg.Value(
        '', help='Read public keys from this file instead of `ssh-add -L`.'
    )
    dry_run = scfg.Value(
        False, isflag=True, help='Print the user-data without building the ISO.'
    )

    @classmethod
    def main(cls, argv=True, **kwargs):
        args = cls.cli(argv=argv, data=kwargs, strict=True)
        cfg = _load_cfg(args.config)
        output = args.output or cfg.seed.output
        user = args.user or cfg.seed.user or current_user()
        if args.pubkey:
            keys = read_public_keys(args.pubkey)
        else:
            keys = agent_public_keys()
        create_seed_iso(output, user, keys, dry_run=bool(args.dry_run))
        if not args.dry_run:
            print(
                f'{output} successfully created '
                f'(use it e.g. with run-iso -c {output})'
            )
        return 0


def create_cloud_init_main(argv: list[str] | None = None) -> None:
    """Entry point for the ``create-cloud-init`` console script."""
    if argv is None:
        argv = sys.argv[1:]
    setup_logging(_count_verbose(argv), _peek_verbosity(argv))
    sys.exit(run_entry(SeedCLI, argv))
