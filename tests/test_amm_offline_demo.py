# [TESTER] v1

from __future__ import annotations

from pathlib import Path

import pytest

from tools.amm_offline_demo import main


def test_offline_demo_runs(capsys: pytest.CaptureFixture[str]) -> None:
    assert main([]) == 0
    out = capsys.readouterr().out
    assert "[offline-demo] OK: 4 events" in out
    assert "swap A->B" in out


def test_offline_demo_reads_yaml_config(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    cfg = tmp_path / "amm.yaml"
    cfg.write_text("fee_numerator: 995\nfee_denominator: 1000\n", encoding="utf-8")
    assert main(["--config", str(cfg), "--liquidity", "10", "--swap", "1", "--swap-back", "1"]) == 0
    assert "fee=995/1000" in capsys.readouterr().out
