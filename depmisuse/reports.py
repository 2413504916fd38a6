"""
Input loading and report output.

Reads the declared-dependencies and used-classes files written by the
upstream scanners, and writes the unused-dependencies and
used-transitive-dependencies reports in the formats build tooling expects.
"""
import json
import logging
from pathlib import Path
from typing import Iterable

import pandas as pd

from depmisuse.models import Component, MalformedComponentError, MisuseReport, TransitiveDependency, components_from_dicts

logger = logging.getLogger(__name__)

FINDING_COLUMNS = ["category", "identifier", "class_name"]


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise MalformedComponentError(f"{path} is not valid UTF-8: {e}") from e


def load_components(path: Path) -> list[Component]:
    """
    Load declared components from a JSON file.

    Args:
        path: JSON array of {"identifier", "isTransitive", "classes"} objects

    Returns:
        Components in file order

    Raises:
        MalformedComponentError: If the file is not a JSON array of valid entries
    """
    path = Path(path)
    try:
        data = json.loads(_read_text(path))
    except json.JSONDecodeError as e:
        raise MalformedComponentError(f"{path} is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise MalformedComponentError(f"{path} must contain a JSON array, got {type(data).__name__}")

    components = components_from_dicts(data)
    logger.debug("Loaded %d declared components from %s", len(components), path)
    return components


def load_used_classes(path: Path) -> frozenset[str]:
    """Load used class names, one per line; blank lines are ignored."""
    path = Path(path)
    classes = frozenset(
        line.strip() for line in _read_text(path).splitlines() if line.strip()
    )
    logger.debug("Loaded %d used classes from %s", len(classes), path)
    return classes


def _prepare_output(path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    # Stale output from a prior run must not survive a failed write
    if path.exists():
        path.unlink()
    return path


def write_unused_dependencies(identifiers: Iterable[str], path: Path) -> Path:
    """Write unused dependency identifiers, newline-separated."""
    path = _prepare_output(path)
    path.write_text("\n".join(identifiers), encoding="utf-8")
    return path


def write_used_transitives(transitives: Iterable[TransitiveDependency], path: Path) -> Path:
    """Write used transitive dependencies as a JSON array."""
    path = _prepare_output(path)
    path.write_text(json.dumps([t.to_dict() for t in transitives], indent=2), encoding="utf-8")
    return path


def write_reports(report: MisuseReport, unused_path: Path, transitives_path: Path) -> tuple[Path, Path]:
    """
    Write both report files, or neither.

    Args:
        report: Classification result
        unused_path: Destination of the unused dependencies report
        transitives_path: Destination of the used transitives report

    Returns:
        Tuple of (unused_path, transitives_path)

    Raises:
        OSError: If either file cannot be written; no report file is left behind
    """
    unused_path = Path(unused_path)
    transitives_path = Path(transitives_path)
    try:
        write_unused_dependencies(report.unused_dependencies, unused_path)
        write_used_transitives(report.used_transitives, transitives_path)
    except OSError:
        for path in (unused_path, transitives_path):
            if path.exists():
                path.unlink()
        raise

    return unused_path, transitives_path


def render_summary(report: MisuseReport) -> str:
    """Render a report as human-readable text."""
    lines = ["Unused dependencies:"]
    if report.unused_dependencies:
        lines.extend(f"- {identifier}" for identifier in report.unused_dependencies)
    else:
        lines.append("  (none)")

    lines.append("")
    lines.append("Used transitive dependencies:")
    if report.used_transitives:
        for transitive in report.used_transitives:
            lines.append(f"- {transitive.identifier}")
            lines.extend(f"    {class_name}" for class_name in transitive.triggering_classes)
    else:
        lines.append("  (none)")

    return "\n".join(lines)


def report_to_dataframe(report: MisuseReport) -> pd.DataFrame:
    """
    Flatten a report into one row per finding.

    Unused directs get a single row with no class name; each triggering
    class of a used transitive gets its own row.
    """
    rows = [
        {"category": "unused_direct", "identifier": identifier, "class_name": None}
        for identifier in report.unused_dependencies
    ]
    for transitive in report.used_transitives:
        rows.extend(
            {"category": "used_transitive", "identifier": transitive.identifier, "class_name": class_name}
            for class_name in transitive.triggering_classes
        )
    return pd.DataFrame(rows, columns=FINDING_COLUMNS)


def export_to_csv(df: pd.DataFrame, output_path: Path) -> None:
    """Export findings to CSV."""
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(output_path, index=False)


def export_to_json(df: pd.DataFrame, output_path: Path) -> None:
    """Export findings to JSON records."""
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    df.to_json(output_path, orient="records", indent=2)
