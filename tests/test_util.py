from __future__ import annotations

import pytest

from isoboot.util import CmdError, shell_join
from isoboot.util import run_cmd as _run_cmd


def test_shell_join_quotes() -> None:
    cmd = ['echo', 'a b', "c'd"]
    s = shell_join(cmd)
    assert "'a b'" in s
    assert s.startswith('echo ')


def test_run_cmd_success_and_failure() -> None:
    ok = _run_cmd(['bash', '-c', 'printf ok'], check=True, capture=True)
    assert ok.code == 0
    assert ok.stdout == 'ok'
    bad = _run_cmd(['bash', '-c', 'exit 7'], check=False, capture=True)
    assert bad.code == 7
    with pytest.raises(CmdError) as ex:
        _run_cmd(['bash', '-c', 'echo nope >&2; exit 9'], check=True, capture=True)
    assert ex.value.result.code == 9
    assert 'nope' in str(ex.value)


def test_run_cmd_without_capture(monkeypatch) -> None:
    calls = []

    class P:
        returncode = 0
        stdout = None
        stderr = None

    monkeypatch.setattr(
        'isoboot.util.subprocess.run',
        lambda cmd, **kwargs: (calls.append((cmd, kwargs)) or P()),
    )
    res = _run_cmd(('qemu', '-version'), check=True, capture=False)
    assert calls[0][0] == ['qemu', '-version']
    assert calls[0][1]['capture_output'] is False
    assert res.stdout == ''
