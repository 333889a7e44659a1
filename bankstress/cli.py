"""
bankstress.cli
==============

Command‑line front end.

Example
-------
bankstress generate --banks 30 --seed 7 --output runs/net01
bankstress generate --config config.yaml
bankstress stress --snapshot runs/net01 --shock targeted --target 4
bankstress stress --seed 7 --shock macro --output results.csv
bankstress run config.yaml
"""
from __future__ import annotations

import dataclasses
import logging
from pathlib import Path
from typing import NoReturn, Optional

import numpy as np
import pandas as pd
import typer

from . import io_utils
from .algorithms import metrics
from .algorithms.generation import generate
from .config import BANK_COUNT, GeneratorConfig, load_scenario
from .datamodel import NetworkSnapshot, SimulationResult
from .errors import BankstressError
from .formatting import format_currency
from .network import to_graph
from .shocks import parse as parse_shock
from .simulate import run as simulate_run
from .simulator import run_stress_test

# --------------------------------------------------------------------------- #
# CLI set‑up
# --------------------------------------------------------------------------- #
app = typer.Typer(add_completion=False, help="Interbank contagion stress tester (DebtRank).")


@app.callback()
def main(
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        "-l",
        help="Logging level (DEBUG, INFO, WARNING, ...).",
    ),
) -> None:
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# --------------------------------------------------------------------------- #
# Helpers
# --------------------------------------------------------------------------- #
def _fail(exc: Exception) -> NoReturn:
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(code=1)


def _print_network(snapshot: NetworkSnapshot) -> None:
    stats = metrics.graph_stats(to_graph(snapshot))
    typer.echo(f"Banks:                 {snapshot.bank_count}")
    typer.echo(f"Exposures:             {int(np.count_nonzero(snapshot.adj))}")
    typer.echo(f"Total initial capital: {format_currency(snapshot.total_initial_capital)}")
    for key, value in stats.items():
        typer.echo(f"{key + ':':<23}{value:.4f}")


def _print_result(result: SimulationResult, top: int) -> None:
    typer.echo(result.shock.describe())
    typer.echo(f"Total banks:     {result.snapshot.bank_count}")
    typer.echo(f"Failures:        {result.total_failures}")
    typer.echo(f"Contagion index: {result.contagion_index:.2f}%")
    typer.echo(f"Total loss:      {format_currency(result.total_loss)}")
    typer.echo(f"Passes:          {result.iterations}")
    if not result.converged:
        typer.echo("Warning: DebtRank hit the iteration cap; ranks are approximate.")

    table = result.to_frame().head(top)
    view = pd.DataFrame(
        {
            "bank": table["name"] + " (" + table["bank_id"].astype(str) + ")",
            "E0": table["initial_capital"].map(format_currency),
            "E": table["capital"].map(format_currency),
            "debt_rank": table["debt_rank"].map("{:.4f}".format),
            "status": table["stress_level"],
            "in/out": table["in_connections"].astype(str) + " / "
            + table["out_connections"].astype(str),
        }
    )
    typer.echo("")
    typer.echo(view.to_string(index=False))


# --------------------------------------------------------------------------- #
# CLI commands
# --------------------------------------------------------------------------- #
@app.command("generate")
def generate_cmd(
    banks: Optional[int] = typer.Option(
        None, "--banks", "-n", help=f"Number of banks (>= 2, default {BANK_COUNT})."
    ),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Random seed."),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        exists=True,
        dir_okay=False,
        help="YAML scenario; its 'network' section and seed are used.",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Directory to write banks.csv / exposures.csv into.",
    ),
) -> None:
    """Generate a random interbank network and print its statistics."""
    try:
        cfg = GeneratorConfig()
        if config_path is not None:
            scenario = load_scenario(config_path)
            cfg = scenario.network
            seed = scenario.seed if seed is None else seed
        if banks is not None:
            cfg = dataclasses.replace(cfg, bank_count=banks)
        snapshot = generate(cfg, seed)
    except BankstressError as exc:
        _fail(exc)

    _print_network(snapshot)
    if output is not None:
        io_utils.save_snapshot(snapshot, output)
        typer.echo(f"Wrote snapshot → {output}")


@app.command("stress")
def stress_cmd(
    shock: str = typer.Option(
        "macro",
        "--shock",
        help="macro | targeted | idiosyncratic (alias: random); 'targeted:<id>' also accepted.",
    ),
    target: Optional[int] = typer.Option(
        None, "--target", "-t", help="Bank id for a targeted shock."
    ),
    snapshot_dir: Optional[Path] = typer.Option(
        None,
        "--snapshot",
        exists=True,
        file_okay=False,
        help="Snapshot directory written by 'generate --output'. A fresh network is generated when omitted.",
    ),
    banks: int = typer.Option(BANK_COUNT, "--banks", "-n", help="Banks in a freshly generated network."),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Random seed."),
    top: int = typer.Option(10, "--top", min=0, help="Rows of the results table to print."),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="CSV file for the per-bank results."
    ),
) -> None:
    """Run one stress test and print the contagion dashboard."""
    shock_text = f"{shock}:{target}" if target is not None and ":" not in shock else shock
    rng = np.random.default_rng(seed)
    try:
        shock_value = parse_shock(shock_text)
        if snapshot_dir is not None:
            snapshot = io_utils.load_snapshot(snapshot_dir)
        else:
            snapshot = generate(GeneratorConfig(bank_count=banks), rng)
        result = run_stress_test(snapshot, shock_value, rng)
    except BankstressError as exc:
        _fail(exc)

    _print_result(result, top)
    if output is not None:
        io_utils.save_result(result, output)
        typer.echo(f"Wrote results → {output}")


@app.command("run")
def run_cmd(
    config_path: Path = typer.Argument(
        ..., exists=True, readable=True, dir_okay=False, help="YAML scenario file."
    ),
) -> None:
    """Run the scenario described by a YAML file and print its summary row."""
    try:
        row = simulate_run(config_path)
    except BankstressError as exc:
        _fail(exc)
    typer.echo(row.to_string())


if __name__ == "__main__":  # pragma: no cover
    app()
