"""Unit tests for the CSV, JSON, HTML and SVG exporters.

These tests do NOT require a database.
"""

from __future__ import annotations

import csv
import io
import json
import xml.etree.ElementTree as ET
from datetime import datetime, timezone

import pytest

from process_mapper.services.export_service import (
    CSV_HEADERS,
    export_csv,
    export_filename,
    export_json,
    parse_csv,
    render_html_report,
    render_svg,
)
from process_mapper.services.process_map_service import build_deterministic_map
from tests.conftest import link, make_map, make_process


@pytest.fixture
def sample_map():
    return make_map(
        [
            make_process(
                "1",
                "Design, Test & \"Ship\"",
                "core",
                inputs=["Brief", "Specs"],
                outputs=["Drawings"],
                iso_clauses=["8.3", "8.5"],
            ),
            make_process("2", "Payroll", "support", inputs=[], outputs=["Payslips"]),
            make_process("3", "Review <Board>", "management"),
        ],
        [link("Design, Test & \"Ship\"", "Payroll", "Hours"), link("Payroll", "Ghost")],
    )


# ---------------------------------------------------------------------------
# Filenames
# ---------------------------------------------------------------------------


class TestExportFilename:
    def test_slug(self):
        assert export_filename("Software Development", "csv") == "iso-9001-process-map-software-development.csv"

    def test_punctuation_collapsed(self):
        assert export_filename("  R&D / Labs ", "json") == "iso-9001-process-map-r-d-labs.json"

    def test_blank_industry(self):
        assert export_filename("", "svg") == "iso-9001-process-map.svg"


# ---------------------------------------------------------------------------
# CSV
# ---------------------------------------------------------------------------


class TestCsv:
    def test_header_and_quoting(self, sample_map):
        text = export_csv(sample_map)
        first_line = text.splitlines()[0]
        assert first_line == ",".join(f'"{h}"' for h in CSV_HEADERS)
        # every cell quoted, including empty ones
        assert '"Payroll","support","",' in text

    def test_row_layout(self, sample_map):
        rows = list(csv.reader(io.StringIO(export_csv(sample_map))))
        assert rows[1] == [
            'Design, Test & "Ship"',
            "core",
            "Brief; Specs",
            "Drawings",
            "Process failure risk",
            "Process performance metric",
            "",
            "8.3; 8.5",
        ]

    def test_round_trip_preserves_name_category_and_lists(self, sample_map):
        parsed = parse_csv(export_csv(sample_map))
        assert [p.name for p in parsed] == [p.name for p in sample_map.processes]
        assert [p.category for p in parsed] == [p.category for p in sample_map.processes]
        for original, back in zip(sample_map.processes, parsed):
            assert "; ".join(back.inputs) == "; ".join(original.inputs)
            assert "; ".join(back.outputs) == "; ".join(original.outputs)
            assert "; ".join(back.iso_clauses) == "; ".join(original.iso_clauses)

    def test_round_trip_benchmark_map(self):
        pm = build_deterministic_map("Manufacturing", ["Order Fulfillment & Shipping"]).process_map
        parsed = parse_csv(export_csv(pm))
        assert [(p.name, p.category, p.inputs, p.outputs) for p in parsed] == [
            (p.name, p.category, p.inputs, p.outputs) for p in pm.processes
        ]

    def test_round_trip_keeps_item_whitespace_and_bare_semicolons(self):
        pm = make_map(
            [make_process("1", "A", inputs=[" padded ", "R;D budget"], outputs=["x"])]
        )
        parsed = parse_csv(export_csv(pm))
        assert parsed[0].inputs == [" padded ", "R;D budget"]

    def test_empty_list_cell(self):
        pm = make_map([make_process("1", "A", inputs=[])])
        assert parse_csv(export_csv(pm))[0].inputs == []

    def test_parse_rejects_unknown_header(self):
        with pytest.raises(ValueError):
            parse_csv('"Name","Kind"\n"A","core"\n')

    def test_parse_empty(self):
        assert parse_csv("") == []

    def test_parse_unknown_category_defaults_to_core(self):
        text = export_csv(make_map([make_process("1", "A")])).replace('"core"', '"primary"')
        assert parse_csv(text)[0].category.value == "core"


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------


class TestJson:
    def test_camel_case_document(self, sample_map):
        when = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        doc = json.loads(export_json(sample_map, "Manufacturing", when))
        assert doc["industry"] == "Manufacturing"
        assert doc["generatedAt"] == "2024-05-01T12:00:00+00:00"
        assert doc["processes"][0]["isoClauses"] == ["8.3", "8.5"]
        assert doc["interactions"][0]["from"] == 'Design, Test & "Ship"'
        assert "processFlow" in doc
        assert "next_id" not in doc and "nextId" not in doc


# ---------------------------------------------------------------------------
# HTML report
# ---------------------------------------------------------------------------


class TestHtmlReport:
    def test_sections_present(self, sample_map):
        html = render_html_report(sample_map, "Manufacturing")
        assert "Executive Summary" in html
        assert "Process Hierarchy" in html
        assert "MANAGEMENT PROCESSES" in html
        assert "Process Interactions" in html
        assert "3 processes: 1 core, 1 support and" in html

    def test_text_escaped(self, sample_map):
        html = render_html_report(sample_map, "<script>alert(1)</script>")
        assert "<script>" not in html
        assert "Review &lt;Board&gt;" in html
        assert "&quot;Ship&quot;" in html

    def test_empty_values_get_placeholders(self, sample_map):
        html = render_html_report(sample_map, "X")
        assert "Not specified" in html  # Payroll has no inputs


# ---------------------------------------------------------------------------
# SVG
# ---------------------------------------------------------------------------


class TestSvg:
    def test_well_formed(self, sample_map):
        root = ET.fromstring(render_svg(sample_map, "R&D <Labs>"))
        assert root.tag.endswith("svg")
        assert root.attrib["width"] == "1200"

    def test_boxes_and_connectors(self, sample_map):
        svg = render_svg(sample_map, "Manufacturing")
        assert svg.count('rx="8"') == 3
        # dangling Payroll -> Ghost is skipped
        assert svg.count('class="arrow"') == 1
        assert 'class="core-process"' in svg
        assert 'class="management-process"' in svg

    def test_legend_and_title(self, sample_map):
        svg = render_svg(sample_map, "Manufacturing")
        assert "ISO 9001 Process Map - Manufacturing" in svg
        assert "Legend:" in svg
        assert "Support Processes" in svg

    def test_empty_map(self):
        root = ET.fromstring(render_svg(make_map([]), None))
        assert root.tag.endswith("svg")
