"""Process map exporters: CSV, JSON, standalone HTML report and SVG diagram.

Every export is built from the same ``ProcessMap`` and is a plain string; the
API layer only wraps it in a response with the right media type.
"""

from __future__ import annotations

import csv
import html
import io
import json
import re
from datetime import datetime, timezone

from process_mapper.schemas.process_map import Process, ProcessCategory, ProcessMap
from process_mapper.services.layout_engine import (
    FLOW_STYLES,
    FlowCanvas,
    flow_layout,
    hierarchy_layout,
    map_summary,
)

CSV_HEADERS = [
    "Process Name",
    "Category",
    "Inputs",
    "Outputs",
    "Risk",
    "KPI",
    "Owner",
    "ISO Clauses",
]
LIST_SEPARATOR = "; "

_SLUG_RE = re.compile(r"[^a-z0-9]+")


def export_filename(industry: str | None, ext: str) -> str:
    """``iso-9001-process-map-<industry-slug>.<ext>``; no slug when industry is blank."""
    slug = _SLUG_RE.sub("-", (industry or "").lower()).strip("-")
    base = "iso-9001-process-map"
    return f"{base}-{slug}.{ext}" if slug else f"{base}.{ext}"


# ── CSV ────────────────────────────────────────────────────────────────


def export_csv(process_map: ProcessMap) -> str:
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL)
    writer.writerow(CSV_HEADERS)
    for p in process_map.processes:
        writer.writerow(
            [
                p.name,
                p.category.value,
                LIST_SEPARATOR.join(p.inputs),
                LIST_SEPARATOR.join(p.outputs),
                p.risk,
                p.kpi,
                p.owner,
                LIST_SEPARATOR.join(p.iso_clauses),
            ]
        )
    return output.getvalue()


def _split_list(cell: str) -> list[str]:
    # Inverse of LIST_SEPARATOR.join; an item that itself contains "; " splits in two
    if not cell:
        return []
    return cell.split(LIST_SEPARATOR)


def parse_csv(text: str) -> list[Process]:
    """Read processes back from ``export_csv`` output. Ids are positional."""
    reader = csv.reader(io.StringIO(text))
    rows = list(reader)
    if not rows:
        return []
    header, body = rows[0], rows[1:]
    if [h.strip() for h in header] != CSV_HEADERS:
        raise ValueError("Unexpected CSV header")

    processes: list[Process] = []
    for row in body:
        if not any(cell.strip() for cell in row):
            continue
        row = (row + [""] * len(CSV_HEADERS))[: len(CSV_HEADERS)]
        name, category, inputs, outputs, risk, kpi, owner, clauses = row
        if not name.strip():
            continue
        try:
            parsed_category = ProcessCategory(category.strip().lower())
        except ValueError:
            parsed_category = ProcessCategory.CORE
        fields = {
            "id": str(len(processes) + 1),
            "name": name,
            "category": parsed_category,
            "inputs": _split_list(inputs),
            "outputs": _split_list(outputs),
            "risk": risk,
            "kpi": kpi,
            "owner": owner,
        }
        iso_clauses = _split_list(clauses)
        if iso_clauses:
            fields["iso_clauses"] = iso_clauses
        processes.append(Process(**fields))
    return processes


# ── JSON ───────────────────────────────────────────────────────────────


def export_json(
    process_map: ProcessMap,
    industry: str | None = None,
    generated_at: datetime | None = None,
) -> str:
    generated_at = generated_at or datetime.now(timezone.utc)
    document = {
        "industry": industry or "",
        "generatedAt": generated_at.isoformat(),
        **process_map.to_export_dict(),
    }
    return json.dumps(document, indent=2)


# ── HTML report ────────────────────────────────────────────────────────

_REPORT_CSS = """
body { font-family: Arial, sans-serif; margin: 40px; line-height: 1.6; color: #333; }
.header { text-align: center; border-bottom: 3px solid #3b82f6; padding-bottom: 20px; margin-bottom: 30px; }
.header h1 { color: #1e40af; margin: 0; font-size: 28px; }
.header h2 { color: #6b7280; margin: 5px 0 0 0; font-weight: normal; }
.section h3, .summary h3 { color: #1e40af; border-bottom: 2px solid #e5e7eb; padding-bottom: 10px; }
.summary { background: #eff6ff; padding: 20px; border-radius: 8px; margin: 30px 0; }
.band { margin: 15px 0; }
.band-title { font-weight: bold; font-size: 13px; letter-spacing: 1px; }
.band-items span { display: inline-block; padding: 6px 12px; margin: 4px; border-radius: 6px; }
.process-card { border: 1px solid #d1d5db; border-radius: 8px; padding: 20px; margin: 15px 0; background: #f9fafb; }
.process-title { font-size: 18px; font-weight: bold; color: #1f2937; }
.process-category { display: inline-block; padding: 4px 12px; border-radius: 20px; font-size: 12px; font-weight: bold; text-transform: uppercase; }
.core { background: #dcfce7; color: #166534; }
.support { background: #fef3c7; color: #92400e; }
.management { background: #e0e7ff; color: #3730a3; }
.detail-label { font-weight: bold; color: #374151; }
.detail-content { color: #6b7280; font-size: 14px; margin-bottom: 8px; }
.interaction-item { background: #f3f4f6; padding: 12px; margin: 8px 0; border-left: 4px solid #3b82f6; border-radius: 4px; }
.footer { text-align: center; margin-top: 40px; padding-top: 20px; border-top: 1px solid #e5e7eb; color: #6b7280; font-size: 12px; }
"""


def _e(value: object) -> str:
    return html.escape(str(value), quote=True)


def _joined(values: list[str], empty: str) -> str:
    return _e(", ".join(values)) if values else _e(empty)


def _process_card(p: Process) -> str:
    details = [
        ("Process Owner", _e(p.owner or "Not assigned")),
        ("Key Inputs", _joined(p.inputs, "Not specified")),
        ("Key Outputs", _joined(p.outputs, "Not specified")),
        ("Primary Risk", _e(p.risk or "Risk assessment pending")),
        ("Key Performance Indicator", _e(p.kpi or "KPI to be defined")),
        ("ISO 9001 Clauses", _joined(p.iso_clauses, "To be mapped")),
    ]
    rows = "".join(
        f'<div class="detail-label">{label}</div><div class="detail-content">{content}</div>'
        for label, content in details
    )
    category = p.category.value
    return (
        '<div class="process-card">'
        f'<div class="process-title">{_e(p.name)}</div>'
        f'<span class="process-category {category}">{category}</span>'
        f"{rows}</div>"
    )


def render_html_report(
    process_map: ProcessMap,
    industry: str | None = None,
    generated_at: datetime | None = None,
) -> str:
    """Standalone HTML report: summary, category bands, process cards, interactions."""
    generated_at = generated_at or datetime.now(timezone.utc)
    industry_text = _e(industry or "General")
    summary = map_summary(process_map.processes, process_map.interactions)
    hierarchy = hierarchy_layout(process_map.processes, process_map.interactions)

    bands = []
    for band in hierarchy.bands:
        items = "".join(
            f'<span class="{band.category.value}">{_e(node.name)}</span>' for node in band.processes
        )
        bands.append(
            f'<div class="band"><div class="band-title">{_e(band.title)}</div>'
            f'<div class="band-items">{items}</div></div>'
        )

    interactions = []
    for note in hierarchy.interactions:
        description = f": {_e(note.description)}" if note.description else ""
        interactions.append(
            f'<div class="interaction-item"><strong>{_e(note.from_)}</strong> &rarr; '
            f"<strong>{_e(note.to)}</strong>{description}</div>"
        )
    interactions_html = "".join(interactions) or "<p>No interactions defined.</p>"

    cards = "".join(_process_card(p) for p in process_map.processes)

    return f"""<!DOCTYPE html>
<html>
<head>
<meta charset="UTF-8">
<title>ISO 9001 Process Map - {industry_text}</title>
<style>{_REPORT_CSS}</style>
</head>
<body>
<div class="header">
<h1>ISO 9001:2015 Process Map</h1>
<h2>{industry_text}</h2>
<p>Generated on {generated_at.strftime("%Y-%m-%d")}</p>
</div>
<div class="summary">
<h3>Executive Summary</h3>
<p>This document outlines the process map for <strong>{industry_text}</strong> operations in
accordance with ISO 9001:2015 requirements. The process map includes
{summary.total_processes} processes: {summary.core} core, {summary.support} support and
{summary.management} management, linked by {summary.interactions} interactions.</p>
</div>
<div class="section">
<h3>Process Hierarchy</h3>
{"".join(bands)}
</div>
<div class="section">
<h3>Process Overview</h3>
{cards}
</div>
<div class="section">
<h3>Process Interactions</h3>
{interactions_html}
</div>
<div class="footer">Generated by ISO Process Mapper</div>
</body>
</html>
"""


# ── SVG diagram ────────────────────────────────────────────────────────

_LEGEND = (
    ("core", "Core Processes"),
    ("support", "Support Processes"),
    ("management", "Management Processes"),
)


def _svg_styles() -> str:
    rules = [
        f".{style.css_class} {{ fill: {style.fill}; stroke: {style.stroke}; stroke-width: 2; }}"
        for style in FLOW_STYLES.values()
    ]
    rules.append(".process-text { fill: white; font-family: Arial; font-size: 12px; text-anchor: middle; }")
    rules.append(".category-text { fill: white; font-family: Arial; font-size: 10px; text-anchor: middle; opacity: 0.8; }")
    rules.append(".title-text { fill: #1f2937; font-family: Arial; font-size: 20px; font-weight: bold; text-anchor: middle; }")
    rules.append(".legend-text { fill: #1f2937; font-family: Arial; font-size: 12px; }")
    rules.append(".arrow { stroke: #6b7280; stroke-width: 2; fill: none; marker-end: url(#arrowhead); }")
    return "\n".join(rules)


def render_svg(
    process_map: ProcessMap,
    industry: str | None = None,
    canvas: FlowCanvas = FlowCanvas(),
) -> str:
    layout = flow_layout(process_map.processes, process_map.interactions, canvas)
    width, height = layout.width, layout.height
    title = _e(f"ISO 9001 Process Map - {industry}" if industry else "ISO 9001 Process Map")

    parts = [
        f'<svg width="{width}" height="{height}" viewBox="0 0 {width} {height}" '
        'xmlns="http://www.w3.org/2000/svg">',
        "<defs>",
        f"<style>{_svg_styles()}</style>",
        '<marker id="arrowhead" markerWidth="10" markerHeight="7" refX="10" refY="3.5" orient="auto">'
        '<polygon points="0 0, 10 3.5, 0 7" fill="#6b7280"/></marker>',
        "</defs>",
        f'<rect width="{width}" height="{height}" fill="#f8fafc"/>',
        f'<text x="{width / 2}" y="40" class="title-text">{title}</text>',
    ]

    # Connectors first so boxes are drawn over line ends
    for c in layout.connectors:
        parts.append(f'<line x1="{c.x1}" y1="{c.y1}" x2="{c.x2}" y2="{c.y2}" class="arrow"/>')

    for node in layout.nodes:
        style = FLOW_STYLES[node.style]
        parts.append(
            f'<rect x="{node.x}" y="{node.y}" width="{node.width}" height="{node.height}" '
            f'class="{style.css_class}" rx="8"/>'
        )
        line_height = 14
        first_y = node.center_y - 8 - (len(node.label_lines) - 1) * line_height / 2
        for i, line in enumerate(node.label_lines):
            parts.append(
                f'<text x="{node.center_x}" y="{round(first_y + i * line_height, 2)}" '
                f'class="process-text">{_e(line)}</text>'
            )
        parts.append(
            f'<text x="{node.center_x}" y="{round(node.y + node.height - 10, 2)}" '
            f'class="category-text">{_e(node.category.upper())}</text>'
        )

    legend = [f'<g transform="translate(50, {height - 120})">']
    legend.append('<text x="0" y="0" class="legend-text" font-weight="bold">Legend:</text>')
    for i, (bucket, label) in enumerate(_LEGEND):
        x = i * 150
        legend.append(
            f'<rect x="{x}" y="10" width="20" height="15" class="{FLOW_STYLES[bucket].css_class}" rx="3"/>'
        )
        legend.append(f'<text x="{x + 25}" y="22" class="legend-text">{label}</text>')
    legend.append("</g>")
    parts.extend(legend)

    parts.append("</svg>")
    return "\n".join(parts)
