"""Unit tests for merging user processes with benchmark data.

These tests do NOT require a database.
"""

from __future__ import annotations

from process_mapper.schemas.process_map import ProcessCategory
from process_mapper.services.benchmark_catalog import CONSULTING, MANUFACTURING
from process_mapper.services.process_synthesizer import (
    categorize,
    is_covered,
    merge_process_names,
    parse_process_lines,
    synthesize,
)

# ---------------------------------------------------------------------------
# Form text parsing
# ---------------------------------------------------------------------------


class TestParseProcessLines:
    def test_trims_and_drops_blanks(self):
        text = "  Sales  \n\n\tProduction\r\n   \nShipping"
        assert parse_process_lines(text) == ["Sales", "Production", "Shipping"]

    def test_empty(self):
        assert parse_process_lines("") == []
        assert parse_process_lines(None) == []


# ---------------------------------------------------------------------------
# Coverage heuristic
# ---------------------------------------------------------------------------


class TestIsCovered:
    def test_first_token_contained(self):
        assert is_covered("Order Fulfillment & Shipping", ["order fulfillment & shipping"])

    def test_case_insensitive(self):
        assert is_covered("Production Planning", ["PRODUCTION scheduling"])

    def test_substring_match_over_merges(self):
        # "product" is contained in "production": the heuristic is loose on purpose
        assert is_covered("Product Design & Development", ["Production"])

    def test_later_tokens_ignored(self):
        assert not is_covered("Order Fulfillment & Shipping", ["Shipping"])


# ---------------------------------------------------------------------------
# Merge
# ---------------------------------------------------------------------------


class TestMergeProcessNames:
    def test_no_benchmark_keeps_user_list(self):
        assert merge_process_names([" A ", "", "B"], None) == ["A", "B"]

    def test_exact_duplicates_dropped(self):
        names = merge_process_names(["Strategic Planning"], MANUFACTURING)
        assert names.count("Strategic Planning") == 1
        assert names[0] == "Strategic Planning"

    def test_user_duplicates_dropped(self):
        assert merge_process_names(["A", "A", "B"], None) == ["A", "B"]


# ---------------------------------------------------------------------------
# Categorization
# ---------------------------------------------------------------------------


class TestCategorize:
    def test_membership(self):
        assert categorize("Production Planning", MANUFACTURING) == ProcessCategory.CORE
        assert categorize("Document Control", MANUFACTURING) == ProcessCategory.SUPPORT
        assert categorize("Internal Audit", MANUFACTURING) == ProcessCategory.MANAGEMENT

    def test_unknown_defaults_to_core(self):
        assert categorize("Marketing", MANUFACTURING) == ProcessCategory.CORE
        assert categorize("Internal Audit", None) == ProcessCategory.CORE

    def test_membership_is_exact(self):
        assert categorize("internal audit", MANUFACTURING) == ProcessCategory.CORE


# ---------------------------------------------------------------------------
# Synthesis
# ---------------------------------------------------------------------------


class TestSynthesize:
    def test_empty_input_no_benchmark(self):
        assert synthesize([], None) == []

    def test_empty_user_list_uses_benchmark_in_order(self):
        processes = synthesize([], MANUFACTURING)
        expected = (
            list(MANUFACTURING.core)
            + list(MANUFACTURING.support[:3])
            + list(MANUFACTURING.management[:2])
        )
        assert [p.name for p in processes] == expected
        assert [p.id for p in processes] == [str(i) for i in range(1, len(expected) + 1)]

    def test_covered_benchmark_core_not_duplicated(self):
        processes = synthesize(["Order Fulfillment & Shipping"], MANUFACTURING)
        names = [p.name for p in processes]
        assert names.count("Order Fulfillment & Shipping") == 1
        assert names[0] == "Order Fulfillment & Shipping"
        # 1 user + 8 uncovered core + 3 support + 2 management
        assert len(processes) == 14

    def test_categories(self):
        processes = synthesize(["Marketing"], MANUFACTURING)
        by_name = {p.name: p for p in processes}
        assert by_name["Marketing"].category == ProcessCategory.CORE
        assert by_name["Human Resources Management"].category == ProcessCategory.SUPPORT
        assert by_name["Strategic Planning"].category == ProcessCategory.MANAGEMENT

    def test_default_attributes(self):
        process = synthesize(["Marketing"], None)[0]
        assert process.inputs == ["Marketing inputs", "Requirements", "Resources"]
        assert process.outputs == ["Marketing outputs", "Deliverables", "Reports"]
        assert process.owner == "Marketing Manager"
        assert process.iso_clauses == ["8.1", "8.2", "9.1"]
        assert process.risk == "Process failure risk"
        assert process.kpi == "Process performance metric"

    def test_risk_and_kpi_cycle_by_index(self):
        processes = synthesize([], CONSULTING)
        n_risks = len(CONSULTING.risks)
        assert processes[0].risk == CONSULTING.risks[0]
        assert processes[n_risks].risk == CONSULTING.risks[0]
        assert processes[n_risks + 1].kpi == CONSULTING.kpis[(n_risks + 1) % len(CONSULTING.kpis)]

    def test_names_unique(self):
        processes = synthesize(["Document Control", "Risk Management"], MANUFACTURING)
        names = [p.name for p in processes]
        assert len(names) == len(set(names))
