from __future__ import annotations

from ..host import check_commands, firmware_status, kvm_available
from ._common import _BaseCommand, _load_cfg


class DoctorCLI(_BaseCommand):
    """Check host prerequisites: QEMU, seed tools, OVMF firmware and KVM."""

    @classmethod
    def main(cls, argv=True, **kwargs):
        args = cls.cli(argv=argv, data=kwargs, strict=True)
        cfg = _load_cfg(args.config)
        missing, missing_opt = check_commands(cfg)
        rc = 0
        if missing:
            print('❌ Missing required commands:', ', '.join(missing))
            rc = 2
        else:
            print('✅ Required host commands are present.')
        if missing_opt:
            print('➖ Missing seed image commands:', ', '.join(missing_opt))
        for path, ok in firmware_status(cfg).items():
            mark = '✅' if ok else '➖'
            print(f'{mark} UEFI firmware {path}')
        if not kvm_available():
            print('➖ /dev/kvm not available; -enable-kvm will fail.')
        return rc
