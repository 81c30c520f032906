"""Main CLI entry point for onlinemetrics.

This module provides a command-line harness that streams a CSV file of
observations through the accumulators and prints the resulting metrics.
"""

from __future__ import annotations

import csv
import json
import logging
import sys
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from onlinemetrics.cli.config_loader import AppConfig, create_config, get_default_config_path
from onlinemetrics.evaluation.harness import Observation, StreamEvaluator, TaskKind
from onlinemetrics.version import __version__

console = Console()
logger = logging.getLogger(__name__)


def get_task_choices() -> list[str]:
    """Get available task kinds."""
    return [kind.value for kind in TaskKind]


@click.group()
@click.version_option(version=__version__, prog_name="onlinemetrics")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool) -> None:
    """onlinemetrics - streaming evaluation metrics.

    \b
    Task kinds:
      - classification: confusion matrix and accuracy
      - regression: MAE, MSE, RMSE, MSLE, RMSLE, R²
      - probability: log loss of true-class probabilities
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--task",
    "-t",
    type=click.Choice(get_task_choices()),
    default=None,
    help="Kind of predictions in the input",
)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file",
)
@click.option("--workers", "-w", type=int, default=None, help="Number of worker threads")
@click.option("--epsilon", type=float, default=None, help="LogLoss smoothing constant")
@click.option("--actual-column", type=str, default=None, help="Column holding actual values")
@click.option("--predicted-column", type=str, default=None, help="Column holding predictions")
@click.option("--weight-column", type=str, default=None, help="Column holding weights")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default=None,
    help="Output format for results",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Save JSON report to file",
)
@click.pass_context
def evaluate(
    ctx: click.Context,
    input_path: Path,
    task: str | None,
    config: Path | None,
    workers: int | None,
    epsilon: float | None,
    actual_column: str | None,
    predicted_column: str | None,
    weight_column: str | None,
    output_format: str | None,
    output: Path | None,
) -> None:
    """Stream a CSV file of observations and report metrics.

    \b
    Examples:
        onlinemetrics evaluate preds.csv --task classification
        onlinemetrics evaluate preds.csv -t regression --workers 4 --format json
        onlinemetrics evaluate probs.csv -t probability --actual-column p_true
    """
    verbose = ctx.obj.get("verbose", False)
    quiet = ctx.obj.get("quiet", False)

    try:
        app_config = create_config(
            config or get_default_config_path(),
            _cli_overrides(
                task=task,
                workers=workers,
                epsilon=epsilon,
                actual_column=actual_column,
                predicted_column=predicted_column,
                weight_column=weight_column,
                output_format=output_format,
                output=output,
                verbose=verbose,
            ),
        )
        logging.basicConfig(level=app_config.logging.level)

        evaluator = StreamEvaluator(
            app_config.evaluation.task,
            workers=app_config.evaluation.workers,
            epsilon=app_config.evaluation.epsilon,
        )
        evaluator.feed(read_observations(input_path, app_config))
        report = evaluator.report()

        if app_config.output.path:
            Path(app_config.output.path).write_text(json.dumps(report, indent=2), encoding="utf-8")
            if not quiet:
                console.print(f"[green]✓[/green] Report saved to {app_config.output.path}")

        if app_config.output.format == "json":
            console.print_json(json.dumps(report))
        else:
            if not quiet:
                console.print(
                    Panel.fit(
                        f"[bold blue]onlinemetrics v{__version__}[/bold blue]",
                        subtitle=f"{app_config.evaluation.task.value} · {input_path.name}",
                    )
                )
            _print_report_table(report)

    except Exception as e:
        console.print(f"[red]Error evaluating {input_path}: {e}[/red]")
        if verbose:
            console.print_exception()
        sys.exit(1)


def _cli_overrides(
    *,
    task: str | None,
    workers: int | None,
    epsilon: float | None,
    actual_column: str | None,
    predicted_column: str | None,
    weight_column: str | None,
    output_format: str | None,
    output: Path | None,
    verbose: bool,
) -> dict[str, Any]:
    """Collect the CLI options that were actually given."""
    overrides: dict[str, Any] = {}
    evaluation = {"task": task, "workers": workers, "epsilon": epsilon}
    columns = {"actual": actual_column, "predicted": predicted_column, "weight": weight_column}
    out = {"format": output_format, "path": str(output) if output else None}

    for section, values in (("evaluation", evaluation), ("columns", columns), ("output", out)):
        given = {k: v for k, v in values.items() if v is not None}
        if given:
            overrides[section] = given

    if verbose:
        overrides["logging"] = {"level": "DEBUG"}
    return overrides


def read_observations(path: Path, config: AppConfig) -> Iterator[Observation]:
    """Yield observations from a CSV file with a header row.

    Rows whose fields cannot be parsed as numbers are skipped with a warning.

    Raises:
        click.UsageError: If a configured column is missing from the header.
    """
    columns = config.columns
    needs_prediction = config.evaluation.task != TaskKind.PROBABILITY

    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        header = reader.fieldnames or []

        required = [columns.actual]
        if needs_prediction:
            required.append(columns.predicted)
        if columns.weight:
            required.append(columns.weight)
        missing = [name for name in required if name not in header]
        if missing:
            raise click.UsageError(f"Missing column(s) in {path.name}: {', '.join(missing)}")

        for line_no, row in enumerate(reader, start=2):
            try:
                yield Observation(
                    actual=float(row[columns.actual]),
                    predicted=float(row[columns.predicted]) if needs_prediction else None,
                    weight=float(row[columns.weight]) if columns.weight else 1.0,
                )
            except (TypeError, ValueError) as e:
                logger.warning(f"Skipping line {line_no} of {path.name}: {e}")


def _format_value(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:.4f}"
    return str(value)


def _print_report_table(report: dict[str, dict[str, Any]]) -> None:
    """Print report as rich tables."""
    table = Table(title="Metrics")
    table.add_column("Metric", style="cyan")
    table.add_column("Statistic")
    table.add_column("Value", justify="right")

    for name, result in report.items():
        table.add_row(name, "value", _format_value(result["value"]))
        for key, value in result["metadata"].items():
            if isinstance(value, (int, float)):
                table.add_row("", key, _format_value(value))

    console.print()
    console.print(table)

    confusion = report.get("confusion_matrix")
    if confusion and confusion["metadata"]["categories"]:
        per_category = Table(title="Per-category")
        per_category.add_column("Category", style="cyan")
        for column in ("Support", "Precision", "Sensitivity", "F1"):
            per_category.add_column(column, justify="right")
        for stats in confusion["metadata"]["categories"]:
            per_category.add_row(
                str(stats["category"]),
                _format_value(stats["support"]),
                _format_value(stats["precision"]),
                _format_value(stats["sensitivity"]),
                _format_value(stats["f1"]),
            )
        console.print(per_category)


@cli.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """Display information about onlinemetrics."""
    console.print(
        Panel.fit(
            f"[bold blue]onlinemetrics v{__version__}[/bold blue]\n\n"
            "[dim]Streaming evaluation metrics for\n"
            "classification and regression models[/dim]",
            title="About",
        )
    )

    table = Table(show_header=True, header_style="bold")
    table.add_column("Task")
    table.add_column("Metrics")
    table.add_row("classification", "accuracy, precision, sensitivity, F1, kappa, matthews")
    table.add_row("regression", "MAE, MSE, RMSE, MSLE, RMSLE, R², max error")
    table.add_row("probability", "log loss")
    console.print(table)

    console.print("\n[bold]Quick Start:[/bold]")
    console.print("  $ onlinemetrics evaluate preds.csv --task classification")
    console.print("  $ onlinemetrics evaluate preds.csv -t regression --format json")


if __name__ == "__main__":
    cli()
