"""Command-line interface for the forward curve builder.

Usage:
    forward-curve run --config config/example.yaml --date 2024-01-02
    forward-curve merge dec24.csv jan25.csv -m 2024-12 -m 2025-01 \
        -a dec24.csv=2024-12 -a jan25.csv=2025-01 -o merged.csv
    forward-curve curve --config config/example.yaml --date 2024-01-02 --plot curve.png
    forward-curve expiry --start-year 2024 --end-year 2026
"""

import logging
from pathlib import Path
from typing import Optional, List
import typer

from .config import CurveConfig, read_config
from .errors import ForwardCurveError
from .session import CurveSession
from .stage1.file_loader import LoadReport

app = typer.Typer(
    name="forward-curve",
    help="Forward curve builder: merge per-maturity price files and build curves",
    add_completion=False,
)


@app.callback()
def main_options(
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level"),
):
    logging.basicConfig(level=getattr(logging, log_level.upper(), logging.INFO), format="%(levelname)s %(message)s")


def _fail(exc: Exception) -> None:
    typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _report_load(report: LoadReport) -> None:
    for name, series in report.series.items():
        typer.echo(f"  {name}: {len(series)} points")
    for name, reason in report.failures.items():
        typer.secho(f"  {name}: failed ({reason})", fg=typer.colors.RED, err=True)


def _parse_assignments(assign: list[str]) -> dict[str, str]:
    """Parse ``FILE=MATURITY`` pairs."""
    out = {}
    for item in assign:
        if "=" not in item:
            raise typer.BadParameter(f"Expected FILE=YYYY-MM, got {item!r}")
        name, maturity_id = item.rsplit("=", 1)
        out[Path(name.strip()).name] = maturity_id.strip()
    return out


def _echo_curve(session: CurveSession, observation_date: str, plot: Optional[Path]) -> None:
    from .stage2.curve_builder import coerce_observation_date, curve_to_frame

    points = session.build_curve(observation_date)
    obs = coerce_observation_date(observation_date)
    typer.echo(f"\nForward curve for {obs.isoformat()}:")
    if not points:
        typer.echo("  (no prices for the declared maturities on this date)")
        return
    typer.echo(curve_to_frame(points).to_string(index=False))

    if plot is not None:
        from .visualization import plot_forward_curve

        out = plot_forward_curve(
            points,
            plot,
            commodity=session.commodity,
            currency=session.currency,
            observation_label=obs.isoformat(),
        )
        typer.echo(f"Saved chart to {out}")


def _session_from_config(config: CurveConfig) -> CurveSession:
    session, report = CurveSession.from_config(config)
    typer.echo(f"Loaded {len(report.series)} file(s) for {len(session.registry)} maturities")
    _report_load(report)
    rows = session.merge()
    typer.echo(f"Merged {len(rows)} dates")
    return session


@app.command()
def run(
    config: str = typer.Option(
        "config/example.yaml",
        "--config", "-c",
        help="Path to configuration file",
    ),
    date: Optional[str] = typer.Option(None, "--date", "-d", help="Observation date (YYYY-MM-DD)"),
    export: Optional[Path] = typer.Option(None, "--export", "-o", help="Write merged table to CSV"),
    plot: Optional[Path] = typer.Option(None, "--plot", help="Write curve chart (PNG)"),
):
    """Load, merge, export and build a curve from a config file."""
    try:
        cfg = read_config(config)
        session = _session_from_config(cfg)

        export_path = export or cfg.export_path
        if export_path is not None:
            out = session.export_csv(export_path)
            typer.echo(f"Saved merged data to {out}")

        observation_date = date or cfg.observation_date
        if observation_date:
            _echo_curve(session, observation_date, plot or cfg.plot_path)
    except (ForwardCurveError, OSError) as exc:
        _fail(exc)


@app.command()
def merge(
    files: List[Path] = typer.Argument(..., help="Per-maturity CSV files"),
    maturity: List[str] = typer.Option(..., "--maturity", "-m", help="Declared maturity (YYYY-MM), repeatable"),
    assign: List[str] = typer.Option([], "--assign", "-a", help="FILE=YYYY-MM assignment, repeatable"),
    spot: Optional[Path] = typer.Option(None, "--spot", help="Spot price CSV"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write merged table to CSV"),
    rows: int = typer.Option(5, "--rows", help="Preview rows to print"),
):
    """Merge price files into one table keyed by date."""
    from .stage2.series_merger import merged_rows_to_frame

    try:
        session = CurveSession()
        for maturity_id in maturity:
            session.registry.add_id(maturity_id)

        report = session.load_files(files)
        _report_load(report)
        for name, maturity_id in _parse_assignments(assign).items():
            session.assign(name, maturity_id)
        if spot is not None:
            session.load_spot(spot)

        merged = session.merge()
        typer.echo(f"Merged {len(merged)} dates")
        typer.echo(merged_rows_to_frame(session.preview(rows)).to_string(index=False))

        if output is not None:
            out = session.export_csv(output)
            typer.echo(f"Saved merged data to {out}")
    except (ForwardCurveError, OSError) as exc:
        _fail(exc)


@app.command()
def curve(
    config: str = typer.Option(
        "config/example.yaml",
        "--config", "-c",
        help="Path to configuration file",
    ),
    date: str = typer.Option(..., "--date", "-d", help="Observation date (YYYY-MM-DD)"),
    plot: Optional[Path] = typer.Option(None, "--plot", help="Write curve chart (PNG)"),
):
    """Build the forward curve for one observation date."""
    try:
        session = _session_from_config(read_config(config))
        _echo_curve(session, date, plot)
    except (ForwardCurveError, OSError) as exc:
        _fail(exc)


@app.command()
def expiry(
    start_year: int = typer.Option(..., help="Start year"),
    end_year: int = typer.Option(..., help="End year"),
    symbol: Optional[str] = typer.Option(None, "--symbol", "-s", help="Contract symbol for CME codes"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write table to CSV"),
):
    """Show third-Friday expiry dates for every month in a year range."""
    from .stage0 import build_expiry_table, save_expiry_table

    if end_year < start_year:
        raise typer.BadParameter("end-year must be >= start-year")

    df = build_expiry_table(start_year, end_year, symbol=symbol)
    typer.echo(df.to_string(index=False))
    if output is not None:
        out = save_expiry_table(df, output)
        typer.echo(f"Saved expiry table to {out}: {len(df)} contracts")


def main() -> None:
    """Entrypoint for the console script."""
    app()


if __name__ == "__main__":
    main()
