"""
Smoke tests for the typer command-line front end.
"""

import textwrap

import pandas as pd
from typer.testing import CliRunner

from bankstress.cli import app
from bankstress.io_utils import BANKS_FILE, EXPOSURES_FILE

runner = CliRunner()


def test_generate_writes_snapshot(tmp_path):
    out = tmp_path / "net"
    result = runner.invoke(app, ["generate", "--banks", "8", "--seed", "3", "--output", str(out)])

    assert result.exit_code == 0, result.output
    assert "Banks:" in result.output
    assert (out / BANKS_FILE).exists()
    assert (out / EXPOSURES_FILE).exists()


def test_generate_from_config_file(tmp_path):
    cfg = tmp_path / "scenario.yaml"
    cfg.write_text("seed: 2\nnetwork:\n  bank_count: 7\n")
    out = tmp_path / "net"
    result = runner.invoke(app, ["generate", "--config", str(cfg), "--output", str(out)])

    assert result.exit_code == 0, result.output
    assert len(pd.read_csv(out / BANKS_FILE)) == 7


def test_generate_rejects_single_bank():
    result = runner.invoke(app, ["generate", "--banks", "1"])
    assert result.exit_code == 1


def test_stress_on_saved_snapshot(tmp_path):
    net = tmp_path / "net"
    runner.invoke(app, ["generate", "--banks", "10", "--seed", "5", "--output", str(net)])

    csv = tmp_path / "results.csv"
    result = runner.invoke(
        app,
        ["stress", "--snapshot", str(net), "--shock", "targeted", "--target", "2",
         "--top", "3", "--output", str(csv)],
    )

    assert result.exit_code == 0, result.output
    assert "Targeted failure of bank 2" in result.output
    for label in ("Total banks:", "Failures:", "Contagion index:", "Total loss:"):
        assert label in result.output
    df = pd.read_csv(csv)
    assert len(df) == 10
    assert bool(df.loc[df["bank_id"] == 2, "is_failed"].iloc[0])


def test_stress_on_fresh_network():
    result = runner.invoke(app, ["stress", "--banks", "6", "--seed", "1", "--shock", "random"])
    assert result.exit_code == 0, result.output
    assert "Total banks:     6" in result.output


def test_stress_unknown_shock_exits_with_error():
    result = runner.invoke(app, ["stress", "--banks", "6", "--shock", "flood"])
    assert result.exit_code == 1


def test_stress_target_out_of_range_exits_with_error():
    result = runner.invoke(app, ["stress", "--banks", "6", "--shock", "targeted", "-t", "9"])
    assert result.exit_code == 1


def test_run_scenario_file(tmp_path):
    path = tmp_path / "scenario.yaml"
    path.write_text(
        textwrap.dedent(
            """
            seed: 11
            network:
              bank_count: 12
            shock: macro
            """
        )
    )
    result = runner.invoke(app, ["run", str(path)])

    assert result.exit_code == 0, result.output
    assert "contagion_index" in result.output
    assert "largest_eigenvalue" in result.output
