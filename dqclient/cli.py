"""
Command-line interface for the data-quality report client.

Provides commands for:
- Submitting a dataset (file, URL or inline JSON) for analysis
- Re-displaying an exported report
- Drilling into individual columns
"""

import logging
import os
import sys
from pathlib import Path

import anyio
import click

from dqclient import __version__
from dqclient.api.client import AnalysisClient
from dqclient.common.export import read_report, write_report
from dqclient.core.state import InputMode
from dqclient.core.types import FileInput
from dqclient.ingest.controller import IngestionController
from dqclient.views.dashboard import build_dashboard
from dqclient.views.drilldown import ColumnDrilldown

_TONE_COLORS = {
    "green": "green",
    "blue": "blue",
    "yellow": "yellow",
    "orange": "bright_red",
    "red": "red",
    "good": "green",
    "warning": "yellow",
    "bad": "red",
    "high": "red",
    "medium": "yellow",
    "info": "blue",
}


def _echo_tone(text, tone, **kwargs):
    click.secho(text, fg=_TONE_COLORS.get(tone), **kwargs)


def _print_more(truncated, noun):
    if truncated.remaining:
        click.echo(f"    ... and {truncated.remaining} more {noun}")


def print_dashboard(report):
    view = build_dashboard(report)
    header = view["header"]
    health = view["health"]
    summary = view["summary"]

    click.secho("Data Quality Report", bold=True)
    click.echo(f"Analysis ID: {header['analysisId']} | Processed in {header['processingTimeMs']:.0f}ms")
    _echo_tone(f"Health score: {health['score']:.1f} ({health['level']})", health["levelTone"], bold=True)
    _echo_tone(health["headline"], health["tone"])
    click.echo(
        f"Format: {summary['fileFormat']} | Rows: {summary['rowCount']:,} | "
        f"Columns: {summary['columnCount']} | Cells: {summary['totalCells']:,}"
    )

    click.echo("")
    click.secho("Quality metrics", bold=True)
    for card in view["metrics"]:
        _echo_tone(f"  {card['title']:<13} {card['score']:6.1f}  {card['details']}", card["tone"])

    nulls = view["charts"]["nullRanking"]
    if nulls is not None:
        click.echo("")
        click.secho("Null percentage by column", bold=True)
        for point in nulls:
            click.echo(f"  {point.label:<18} {point.value:6.2f}%")
        _print_more(nulls, "columns")

    click.echo("")
    click.secho("Column types", bold=True)
    for entry in view["charts"]["typeDistribution"]:
        click.echo(f"  {entry.type:<18} {entry.count}")

    if view["issues"]:
        click.echo("")
        click.secho(f"Data quality issues ({len(view['issues'])})", bold=True)
        for issue in view["issues"]:
            where = f" [{issue['columnName']}]" if issue["columnName"] else ""
            _echo_tone(f"  {issue['severity']:<7} {issue['issueType']}{where}: {issue['description']}", issue["tone"])
            if issue["recommendation"]:
                click.echo(f"          -> {issue['recommendation']}")

    if view["pii"]:
        click.echo("")
        _echo_tone(f"PII detected in {view['pii']['totalPIIColumns']} column(s)", "high", bold=True)
        for column, types in view["pii"]["byColumn"].items():
            click.echo(f"  {column}: {', '.join(types)}")

    duplicates = view["duplicates"]
    if duplicates:
        click.echo("")
        click.secho(
            f"Found {duplicates['totalDuplicates']} duplicate rows "
            f"({duplicates['duplicatePercentage']:.2f}% of total)",
            bold=True,
        )
        for point in duplicates["byColumn"]:
            click.echo(f"  {point.label:<18} {point.value}")
        rows = duplicates["rowIndices"]
        if rows.items:
            more = f" ... and {rows.remaining} more" if rows.remaining else ""
            click.echo(f"  Rows: {', '.join(str(i) for i in rows)}{more}")

    if view["recommendations"]:
        click.echo("")
        click.secho("Recommendations", bold=True)
        for entry in view["recommendations"]:
            click.echo(f"  {entry['index']}. {entry['text']}")


def print_column(drilldown, name):
    try:
        drilldown.toggle(name)
    except KeyError:
        raise click.BadParameter(f"unknown column '{name}'", param_hint="--column")
    detail = drilldown.detail()
    click.echo("")
    click.secho(f"Column: {detail.name} ({detail.data_type})", bold=True)
    if detail.quality_issues:
        for issue in detail.quality_issues:
            click.echo(f"  issue: {issue}")
    if detail.pii_types:
        _echo_tone(f"  PII: {', '.join(detail.pii_types)}", "high")
    if detail.numeric is not None:
        stats = detail.numeric
        for metric, value in stats.box_plot():
            click.echo(f"  {metric:<7} {value:.2f}")
        click.echo(f"  Mean    {stats.mean:.2f}")
        click.echo(f"  Std Dev {stats.std_dev:.2f}" if stats.std_dev is not None else "  Std Dev N/A")
    if detail.outliers is not None:
        shown = ", ".join(str(v) for v in detail.outliers)
        more = f" and {detail.outliers.remaining} more" if detail.outliers.remaining else ""
        click.echo(f"  Outliers: {shown}{more}")
    if detail.top_values is not None:
        click.echo("  Top values:")
        for point in detail.top_values:
            click.echo(f"    {point.label:<23} {point.value:,}")
        _print_more(detail.top_values, "values")
    drilldown.collapse()


def _inline_text(value):
    if value.startswith("@"):
        return Path(value[1:]).read_text(encoding="utf-8")
    return value


@click.group()
@click.version_option(version=__version__)
@click.option('--log-level', type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              default=lambda: os.environ.get("DQ_LOG_LEVEL", "WARNING"), help='Logging level')
def cli(log_level):
    """
    Data quality report client.

    Sends a dataset to the data-quality analysis service and presents the
    returned report: health score, quality dimensions, issues, PII findings,
    duplicates, recommendations and per-column drill-down.
    """
    logging.basicConfig(level=getattr(logging, log_level.upper(), logging.WARNING))


@cli.command()
@click.option('--file', 'file_path', type=click.Path(exists=True, dir_okay=False), help='Data file (.csv, .json, .xlsx, .xls)')
@click.option('--url', 'data_url', help='URL the service should fetch the dataset from')
@click.option('--inline', 'inline_data', help='Inline JSON records, or @PATH to read them from a file')
@click.option('--pii/--no-pii', default=True, help='Perform PII detection (recommended)')
@click.option('--bias/--no-bias', default=False, help='Perform bias detection')
@click.option('--export', 'export_dir', type=click.Path(file_okay=False), help='Directory to write the JSON report to')
@click.option('--column', 'columns', multiple=True, help='Show detailed statistics for a column (repeatable)')
@click.option('--api-url', envvar='DQ_API_URL', help='Analysis service URL (default: $DQ_API_URL or localhost)')
@click.option('--timeout', type=float, default=None, help='Request timeout in seconds')
def analyze(file_path, data_url, inline_data, pii, bias, export_dir, columns, api_url, timeout):
    """
    Analyze a dataset and print its data quality report.

    Exactly one of --file, --url or --inline must be given.

    Examples:

    \b
    dq-report analyze --file customers.csv --export reports/
    dq-report analyze --url https://example.com/data.csv --no-pii
    dq-report analyze --inline '[{"name": "John", "age": 30}]' --column age
    """
    provided = [value for value in (file_path, data_url, inline_data) if value is not None]
    if len(provided) != 1:
        raise click.UsageError("Provide exactly one of --file, --url or --inline")

    if file_path is not None:
        mode, value = InputMode.FILE, FileInput.from_path(file_path)
    elif data_url is not None:
        mode, value = InputMode.URL, data_url
    else:
        mode, value = InputMode.INLINE, _inline_text(inline_data)

    controller = IngestionController(
        AnalysisClient(api_url, timeout=timeout),
        perform_pii_check=pii,
        perform_bias_check=bias,
    )
    controller.select_mode(mode)
    controller.set_input(value)

    report = anyio.run(controller.submit)
    if report is None:
        click.secho(f"Error: {controller.error}", fg="red", err=True)
        sys.exit(1)

    print_dashboard(report)
    drilldown = controller.drilldown()
    for name in columns:
        print_column(drilldown, name)

    if export_dir:
        path = write_report(report, export_dir)
        click.echo(f"\nReport exported to {path}")


@cli.command()
@click.argument('report_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--column', 'columns', multiple=True, help='Show detailed statistics for a column (repeatable)')
def show(report_file, columns):
    """
    Display a previously exported report.

    REPORT_FILE: Path to a data-quality-report-<id>.json file
    """
    try:
        report = read_report(report_file)
    except ValueError as exc:
        click.secho(f"Error: {report_file} is not a valid report ({exc})", fg="red", err=True)
        sys.exit(1)

    print_dashboard(report)
    drilldown = ColumnDrilldown(report.column_profiles)
    for name in columns:
        print_column(drilldown, name)


def main():
    cli()


if __name__ == '__main__':
    main()
