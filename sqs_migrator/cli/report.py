"""
Run summary output for the SQS queue migration tool
"""

import os
from typing import Optional

import click
import yaml

from sqs_migrator.core.state import RunSummary


def print_run_summary(summary: RunSummary, report_file: Optional[str] = None) -> None:
    """Print a summary of the run to the console."""
    click.echo("\n" + "=" * 80)
    click.echo("DRY RUN SUMMARY" if summary.dry_run else "MIGRATION SUMMARY")
    click.echo("=" * 80)
    click.echo(f"Batches received: {summary.batches}")
    click.echo(f"Messages skipped (too old or filtered out): {summary.skipped}")
    if summary.dry_run:
        click.echo(f"Messages that would be migrated: {summary.processed}")
    else:
        click.echo(f"Messages attempted: {summary.processed}")
        click.echo(f"Successes: {summary.sent}, Failed: {summary.send_failed}")
        click.echo(
            f"Removed from source: {summary.deleted}, "
            f"Failed removals: {summary.delete_failed}"
        )

    if report_file:
        click.echo(f"\nDetailed report saved to {report_file}")
    click.echo("=" * 80)
    if summary.dry_run:
        click.echo("\nTo perform the actual migration, run again with --execute")
        click.echo("=" * 80)


def write_report(summary: RunSummary, output_dir: str) -> str:
    """Write the run counters as YAML into ``output_dir`` and return the path."""
    os.makedirs(output_dir, exist_ok=True)
    report_file = os.path.join(output_dir, "migration_report.yaml")
    with open(report_file, "w") as f:
        yaml.safe_dump(summary.to_dict(), f, default_flow_style=False)
    return report_file
