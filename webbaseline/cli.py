"""Console script for webbaseline."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path

import click
from rich.console import Console
from rich.text import Text

from ._version import __version__
from .constants import DEFAULT_TIMEOUT_SECONDS, FEATURES_URL, LANGUAGE_BY_SUFFIX
from .detector import FeatureDetector
from .exceptions import BaselineError
from .http import use_shared_client
from .model import CompatibilityReport, DetectedFeature
from .render import render_feature, render_report
from .scoring import build_report
from .util.debug import configure_logging
from .webstatus import WebStatusClient


@dataclass(frozen=True)
class FileResult:
    path: Path
    language: str
    features: list[DetectedFeature]
    report: CompatibilityReport
    at_position: DetectedFeature | None = None


def infer_language(path: Path) -> str | None:
    return LANGUAGE_BY_SUFFIX.get(path.suffix.lower())


def _parse_position(
    _ctx: click.Context, _param: click.Parameter, value: str | None
) -> tuple[int, int] | None:
    if value is None:
        return None
    line_text, sep, column_text = value.partition(":")
    try:
        line = int(line_text)
        column = int(column_text) if sep else 1
    except ValueError:
        raise click.BadParameter("expected LINE:COL, e.g. 12:4") from None
    if line < 1 or column < 1:
        raise click.BadParameter("LINE and COL are 1-based")
    # Columns are 1-based on the command line and 0-based in detections.
    return line, column - 1


def _read_source(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise click.ClickException(f"Cannot read {path}: {exc.strerror or exc}") from exc


async def scan_files(
    sources: list[tuple[Path, str, str]],
    *,
    url: str,
    timeout: float,
    position: tuple[int, int] | None = None,
) -> list[FileResult]:
    """Detect features in every source with one shared client and catalog."""
    results: list[FileResult] = []
    async with use_shared_client(timeout):
        detector = FeatureDetector(WebStatusClient(url, timeout=timeout))
        for path, language, source_text in sources:
            features = await detector.detect_with_cache(source_text, language)
            at_position = None
            if position is not None:
                at_position = await detector.find_feature_at_position(
                    source_text, position[0], position[1], language
                )
            results.append(
                FileResult(path, language, features, build_report(features), at_position)
            )
    return results


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument(
    "paths",
    metavar="PATH...",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-l",
    "--language",
    type=click.Choice(["css", "javascript", "typescript"], case_sensitive=False),
    help="Language of every PATH (default: inferred from the file suffix).",
)
@click.option(
    "--at",
    "position",
    metavar="LINE:COL",
    callback=_parse_position,
    help="Show the feature at this 1-based position.",
)
@click.option(
    "--fail-under",
    type=click.IntRange(0, 100),
    help="Exit with an error when a file scores below this value.",
)
@click.option("--timeout", type=float, default=DEFAULT_TIMEOUT_SECONDS, show_default=True)
@click.option("--url", default=FEATURES_URL, show_default=True, help="Feature catalog endpoint.")
@click.option("--debug", is_flag=True, help="Log catalog and detection activity to stderr.")
@click.version_option(__version__, "-v", "--version")
def main(
    paths: tuple[Path, ...],
    language: str | None,
    position: tuple[int, int] | None,
    fail_under: int | None,
    timeout: float,
    url: str,
    debug: bool,
) -> None:
    """
    Report web platform Baseline compatibility for CSS and JavaScript files

    \b
    Example usages:
      webbaseline styles.css
      webbaseline app.ts --at 12:8
      webbaseline src/*.js --fail-under 80
    """
    configure_logging(debug=debug)
    console = Console()

    sources: list[tuple[Path, str, str]] = []
    for path in paths:
        path_language = language.lower() if language else infer_language(path)
        if path_language is None:
            console.print(Text(f"Skipping {path}: unknown language", style="dim"))
            continue
        sources.append((path, path_language, _read_source(path)))

    if not sources:
        raise click.ClickException("No CSS or JavaScript files to scan.")

    try:
        results = asyncio.run(scan_files(sources, url=url, timeout=timeout, position=position))
    except BaselineError as exc:
        raise click.ClickException(str(exc)) from exc

    failing: list[FileResult] = []
    for result in results:
        console.print(render_report(result.report, result.features, title=str(result.path)))
        if position is not None:
            if result.at_position is None:
                console.print(Text(f"No feature at {position[0]}:{position[1] + 1}", style="dim"))
            else:
                console.print(render_feature(result.at_position))
        if fail_under is not None and result.report.score < fail_under:
            failing.append(result)

    if failing:
        names = ", ".join(f"{item.path} ({item.report.score})" for item in failing)
        raise click.ClickException(f"Score below {fail_under}: {names}")
