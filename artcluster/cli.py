"""
Command-line interface for ART clustering.

Provides ``artcluster fit`` to cluster a delimited numeric file and the
``artcluster config`` group to manage YAML configuration files.
"""

from collections import Counter
from pathlib import Path

import click
import numpy as np
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import (
    DEFAULT_CONFIG_FILE,
    ClusteringConfig,
    ConfigManager,
    build_engine,
    build_parameters,
)
from .core.errors import ARTError
from .engine.algorithms import ALGORITHMS
from .utils.logging_setup import get_logger, log_operation, setup_logging

logger = get_logger(__name__)

console = Console()


@click.group(name="artcluster")
@click.version_option(__version__, prog_name="artcluster")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Logging level"
)
def cli(log_level):
    """Incremental clustering with Adaptive Resonance Theory engines."""
    setup_logging(level=log_level)


@cli.command(name="fit")
@click.argument("data", type=click.Path(exists=True, dir_okay=False))
@click.option("--config", type=click.Path(exists=True), help="Path to config file")
@click.option("--algorithm", type=click.Choice(sorted(ALGORITHMS)), help="Clustering algorithm")
@click.option("--vigilance", type=float, help="Vigilance threshold in [0, 1]")
@click.option("--learning-rate", type=float, help="Learning rate in [0, 1]")
@click.option("--vectorized/--scalar", default=None, help="Use the vectorized engine")
@click.option("--epochs", type=int, help="Number of passes over the data")
@click.option("--delimiter", default=",", show_default=True, help="Column delimiter")
@click.option("--output", type=click.Path(), help="Write one label per line to this file")
def fit(data, config, algorithm, vigilance, learning_rate, vectorized, epochs, delimiter, output):
    """
    Cluster the rows of a numeric DATA file.

    Command-line options take precedence over the config file, which takes
    precedence over the built-in defaults.
    """
    log_operation(logger, "fit", data=data)

    try:
        run_config = ConfigManager(config).config
        overrides = run_config.to_dict()
        if algorithm:
            overrides["algorithm"] = algorithm
        if vectorized is not None:
            overrides["vectorized"] = vectorized
        if epochs is not None:
            overrides["epochs"] = epochs
        if vigilance is not None:
            overrides["parameters"]["vigilance"] = vigilance
        if learning_rate is not None:
            overrides["parameters"]["learning_rate"] = learning_rate
        run_config = ClusteringConfig.from_dict(overrides)
        params = build_parameters(run_config)
    except ARTError as e:
        console.print(f"[red]Invalid configuration: {e.message}[/red]")
        raise click.exceptions.Exit(1)

    try:
        samples = np.loadtxt(data, delimiter=delimiter, ndmin=2, dtype=np.float64)
    except ValueError as e:
        console.print(f"[red]Could not read {data}: {e}[/red]")
        raise click.exceptions.Exit(1)

    if samples.shape[0] == 0:
        console.print(f"[yellow]No samples in {data}[/yellow]")
        return

    console.print(
        f"[cyan]Clustering {samples.shape[0]} samples of dimension {samples.shape[1]} "
        f"with {run_config.algorithm}{' (vectorized)' if run_config.vectorized else ''}...[/cyan]"
    )

    try:
        with build_engine(run_config) as engine:
            labels = engine.fit_predict(samples, params, epochs=run_config.epochs)
            category_count = engine.get_category_count()
            stats = engine.get_performance_stats()
    except ARTError as e:
        console.print(f"[red]Clustering failed: {e.message}[/red]")
        raise click.exceptions.Exit(1)

    console.print(f"\n[green]Found {category_count} categories[/green]")
    _print_label_table(labels)
    _print_stats_table(stats.to_dict())

    if output:
        output_path = Path(output)
        np.savetxt(output_path, labels, fmt="%d")
        console.print(f"[green]Labels saved to {output}[/green]")


def _print_label_table(labels):
    table = Table(title="Category sizes")
    table.add_column("Category", justify="right", style="cyan")
    table.add_column("Samples", justify="right")
    for label, count in sorted(Counter(labels.tolist()).items()):
        table.add_row(str(label), str(count))
    console.print(table)


def _print_stats_table(stats):
    table = Table(title="Performance")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    for key, value in stats.items():
        if key == "category_salience":
            continue
        table.add_row(key, str(value))
    console.print(table)


@cli.group(name="config")
def config_group():
    """Manage clustering configuration."""
    pass


@config_group.command(name="init")
@click.option(
    "--path",
    type=click.Path(),
    default=DEFAULT_CONFIG_FILE,
    help="Path for config file"
)
@click.option("--algorithm", type=click.Choice(sorted(ALGORITHMS)), default="fuzzy")
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def config_init(path, algorithm, force):
    """Write a default configuration file."""
    config_path = Path(path)

    if config_path.exists() and not force:
        if not click.confirm(f"Config file {path} already exists. Overwrite?"):
            console.print("[yellow]Aborted[/yellow]")
            return

    ClusteringConfig.template(algorithm).save_to_file(config_path)
    console.print(f"[green]✓ Created config file at {path}[/green]")
    if algorithm == "fusion":
        console.print("[yellow]Set channel_dims and channel_weights to match your data[/yellow]")


@config_group.command(name="show")
@click.option(
    "--path",
    type=click.Path(exists=True),
    help="Path to config file"
)
def config_show(path):
    """Display the effective configuration."""
    try:
        manager = ConfigManager(path)
        manager.display(manager.config)
    except ARTError as e:
        console.print(f"[red]{e.message}[/red]")
        raise click.exceptions.Exit(1)


@config_group.command(name="validate")
@click.option(
    "--path",
    type=click.Path(exists=True),
    help="Path to config file"
)
def config_validate(path):
    """Validate the effective configuration."""
    try:
        manager = ConfigManager(path)
        issues = manager.validate_config(manager.config)
    except ARTError as e:
        issues = [e.message]

    if issues:
        console.print("[red]✗ Configuration has validation errors[/red]")
        for issue in issues:
            console.print(f"  • {issue}")
        raise click.exceptions.Exit(1)

    console.print("[green]✓ Configuration is valid[/green]")


def main():
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
