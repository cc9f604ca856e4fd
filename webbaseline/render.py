"""Hover cards and report rendering."""

from __future__ import annotations

from datetime import date

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .constants import (
    BROWSER_LABELS,
    CANIUSE_URL_TEMPLATE,
    NOT_SUPPORTED_MARKER,
    STATUS_HINT_MAP,
    STATUS_ICON_MAP,
    STATUS_LABEL_MAP,
    STATUS_STYLE_MAP,
    TRACKED_BROWSERS,
)
from .model import CompatibilityReport, DetectedFeature
from .util.text import ellipsize

_SEVERITY_STYLE = {"error": "bold red", "warning": "yellow", "info": "cyan"}


def format_baseline_date(value: str | None) -> str | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10]).strftime("%b %d, %Y")
    except ValueError:
        return value


def caniuse_url(value: str | None) -> str | None:
    if not value:
        return None
    if value.startswith(("http://", "https://")):
        return value
    return CANIUSE_URL_TEMPLATE.format(feature=value)


def _support_lines(feature: DetectedFeature) -> list[str]:
    support = feature.browser_support or {}
    lines: list[str] = []
    for browser in TRACKED_BROWSERS:
        version = support.get(browser)
        if not version:
            continue
        if version == NOT_SUPPORTED_MARKER:
            lines.append(f"{BROWSER_LABELS[browser]}: not supported")
        else:
            lines.append(f"{BROWSER_LABELS[browser]} {version}+")
    return lines


def hover_markdown(feature: DetectedFeature) -> str:
    """Markdown hover card for an editor tooltip."""
    icon = STATUS_ICON_MAP.get(feature.status, STATUS_ICON_MAP["unknown"])
    label = STATUS_LABEL_MAP.get(feature.status, STATUS_LABEL_MAP["unknown"])
    hint = STATUS_HINT_MAP.get(feature.status, STATUS_HINT_MAP["unknown"])

    parts = [f"### {icon} {feature.name}", f"**{label}** - {hint}", feature.description]

    since = format_baseline_date(feature.baseline_date)
    if since:
        parts.append(f"**Baseline Since:** {since}")

    support = _support_lines(feature)
    if support:
        parts.append("**Browser Support:**\n\n" + "\n".join(f"- {line}" for line in support))

    links: list[str] = []
    if feature.spec:
        links.append(f"[View Specification]({feature.spec})")
    caniuse = caniuse_url(feature.caniuse)
    if caniuse:
        links.append(f"[Can I Use]({caniuse})")
    if links:
        parts.append(" | ".join(links))

    return "\n\n".join(parts) + "\n"


def render_feature(feature: DetectedFeature) -> Group:
    """Render one detected feature as a Rich panel."""
    style = STATUS_STYLE_MAP.get(feature.status, STATUS_STYLE_MAP["unknown"])
    icon = STATUS_ICON_MAP.get(feature.status, STATUS_ICON_MAP["unknown"])
    label = STATUS_LABEL_MAP.get(feature.status, STATUS_LABEL_MAP["unknown"])

    lines: list[Text] = [
        Text(feature.name, style="bold"),
        Text(f"{icon} {label}", style=style),
        Text(f"Line {feature.line}, column {feature.column + 1}", style="dim"),
    ]
    if feature.description and feature.description != feature.name:
        lines.append(Text(""))
        lines.append(Text(feature.description))

    since = format_baseline_date(feature.baseline_date)
    if since:
        lines.append(Text(f"Baseline since: {since}"))

    support = _support_lines(feature)
    if support:
        lines.append(Text(""))
        lines.append(Text("Browser Support", style="bold"))
        lines.extend(Text(f"  {line}") for line in support)

    if feature.spec:
        lines.append(Text(f"Spec: {feature.spec}"))
    caniuse = caniuse_url(feature.caniuse)
    if caniuse:
        lines.append(Text(f"Can I use: {caniuse}"))

    title = f"/{feature.feature_id}" if feature.feature_id else None
    return Group(Panel(Group(*lines), border_style=style, title=title))


def render_report(
    report: CompatibilityReport,
    features: list[DetectedFeature],
    *,
    title: str | None = None,
    width: int = 60,
) -> Group:
    """Render a file's compatibility report as a Rich renderable group."""
    stats = report.stats
    header = Text(f"Compatibility score: {report.score}/100", style="bold")
    counts = Text(
        f"{STATUS_ICON_MAP['widely_available']} {stats.widely_available}  "
        f"{STATUS_ICON_MAP['newly_available']} {stats.newly_available}  "
        f"{STATUS_ICON_MAP['limited_availability']} {stats.limited_availability}  "
        f"{STATUS_ICON_MAP['unknown']} {stats.unknown}  "
        f"Total: {stats.total}"
    )

    body: list[RenderableType] = [header, counts]
    if features:
        table = Table(show_header=True, header_style="bold", expand=False)
        table.add_column("Line", justify="right")
        table.add_column("Col", justify="right")
        table.add_column("Feature")
        table.add_column("Status")
        for feature in features:
            table.add_row(
                str(feature.line),
                str(feature.column + 1),
                ellipsize(feature.name, width),
                Text(
                    STATUS_LABEL_MAP.get(feature.status, STATUS_LABEL_MAP["unknown"]),
                    style=STATUS_STYLE_MAP.get(feature.status, STATUS_STYLE_MAP["unknown"]),
                ),
            )
        body.append(Text(""))
        body.append(table)
    else:
        body.append(Text("No web platform features detected.", style="dim"))

    if report.recommendations:
        body.append(Text(""))
        body.append(Text("Recommendations", style="bold"))
        for item in report.recommendations:
            body.append(
                Text(f"[{item.severity}] {item.feature}: ", style=_SEVERITY_STYLE[item.severity])
                + Text(item.suggestion)
            )
            if item.alternatives:
                body.append(Text(f"    Alternatives: {', '.join(item.alternatives)}", style="dim"))
            if item.polyfill:
                body.append(Text(f"    Polyfill: {item.polyfill}", style="dim"))

    return Group(Panel(Group(*body), border_style="blue", title=title))
