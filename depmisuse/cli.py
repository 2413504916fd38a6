"""
Command-line interface for depmisuse.

Runs the dependency classifier over scanner output files and writes the
unused-dependency and used-transitive reports.
"""
import logging
import sys
from dataclasses import replace
from pathlib import Path

import click
import yaml

from depmisuse.classifier import DependencyClassifier
from depmisuse.config import DEFAULT_CONFIG_FILE, load_config
from depmisuse.models import DepMisuseError
from depmisuse.reports import (
    export_to_csv,
    export_to_json,
    load_components,
    load_used_classes,
    render_summary,
    report_to_dataframe,
    write_reports,
)

DEFAULT_UNUSED_OUTPUT = Path("build/reports/unused-dependencies.txt")
DEFAULT_TRANSITIVES_OUTPUT = Path("build/reports/used-transitive-dependencies.json")

EXIT_ERROR = 1
EXIT_FINDINGS = 3


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def main(verbose):
    """depmisuse - unused direct and used transitive dependency detector."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("declared", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("used", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--unused-output", type=click.Path(dir_okay=False, path_type=Path),
              default=DEFAULT_UNUSED_OUTPUT, show_default=True,
              help="Where to write unused direct dependencies")
@click.option("--transitives-output", type=click.Path(dir_okay=False, path_type=Path),
              default=DEFAULT_TRANSITIVES_OUTPUT, show_default=True,
              help="Where to write used transitive dependencies")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help=f"Config file (default: ./{DEFAULT_CONFIG_FILE} if present)")
@click.option("--legacy-ordering", is_flag=True,
              help="Only let earlier direct dependencies shadow transitive classes")
@click.option("--export-csv", type=click.Path(path_type=Path), help="Export findings to CSV file")
@click.option("--export-json", type=click.Path(path_type=Path), help="Export findings to JSON file")
@click.option("--fail-on-findings", is_flag=True, help="Exit with status 3 if anything is reported")
def analyze(declared, used, unused_output, transitives_output, config_path,
            legacy_ordering, export_csv, export_json, fail_on_findings):
    """
    Classify declared dependencies against used classes.

    DECLARED is the JSON list of declared dependencies with their classes;
    USED lists the class names referenced by the compiled project, one per line.
    """
    try:
        config = load_config(config_path)
        if legacy_ordering:
            config = replace(config, legacy_ordering=True)

        components = load_components(declared)
        used_classes = load_used_classes(used)
        report = DependencyClassifier(config).classify(components, used_classes)
    except (DepMisuseError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_ERROR)

    try:
        unused_path, transitives_path = write_reports(report, unused_output, transitives_output)
    except OSError as e:
        click.echo(f"Error writing reports: {e}", err=True)
        sys.exit(EXIT_ERROR)

    click.echo(f"Unused dependencies report: {unused_path}")
    click.echo(f"Used transitive dependencies report: {transitives_path}")
    click.echo()
    click.echo(render_summary(report))

    if export_csv or export_json:
        df = report_to_dataframe(report)
        if export_csv:
            export_to_csv(df, export_csv)
            click.echo(f"\nExported to {export_csv}")
        if export_json:
            export_to_json(df, export_json)
            click.echo(f"\nExported to {export_json}")

    if fail_on_findings and not report.is_clean:
        sys.exit(EXIT_FINDINGS)


@main.command(name="show-config")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help=f"Config file (default: ./{DEFAULT_CONFIG_FILE} if present)")
def show_config(config_path):
    """Print the effective classifier configuration as YAML."""
    try:
        config = load_config(config_path)
    except (DepMisuseError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_ERROR)

    click.echo(yaml.safe_dump(config.to_dict(), sort_keys=False).rstrip())


if __name__ == "__main__":
    main()
