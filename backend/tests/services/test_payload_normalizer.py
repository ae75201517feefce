"""Unit tests for generator payload validation and normalization.

These tests do NOT require a database.
"""

from __future__ import annotations

import pytest

from process_mapper.core.errors import MalformedPayloadError
from process_mapper.schemas.process_map import ProcessCategory
from process_mapper.services.payload_normalizer import normalize_generator_payload


def _payload(*processes, interactions=None, flow=None):
    data = {"processes": list(processes)}
    if interactions is not None:
        data["interactions"] = interactions
    if flow is not None:
        data["processFlow"] = flow
    return data


# ---------------------------------------------------------------------------
# Rejection
# ---------------------------------------------------------------------------


class TestRejectsUnusablePayloads:
    @pytest.mark.parametrize("payload", [None, [], "text", 42])
    def test_not_an_object(self, payload):
        with pytest.raises(MalformedPayloadError):
            normalize_generator_payload(payload)

    @pytest.mark.parametrize("payload", [{}, {"processes": "many"}, {"processes": {"a": 1}}])
    def test_no_process_list(self, payload):
        with pytest.raises(MalformedPayloadError):
            normalize_generator_payload(payload)

    def test_empty_process_list_is_valid(self):
        assert normalize_generator_payload({"processes": []}).processes == []


# ---------------------------------------------------------------------------
# Process defaults
# ---------------------------------------------------------------------------


class TestProcessDefaults:
    def test_full_process_kept(self):
        pm = normalize_generator_payload(
            _payload(
                {
                    "name": "Audit",
                    "category": "management",
                    "inputs": ["Plan"],
                    "outputs": ["Findings"],
                    "risk": "Missed issues",
                    "kpi": "Findings closed",
                    "owner": "QA Lead",
                    "isoClauses": ["9.2"],
                }
            )
        )
        p = pm.processes[0]
        assert p.category == ProcessCategory.MANAGEMENT
        assert (p.inputs, p.outputs) == (["Plan"], ["Findings"])
        assert (p.risk, p.kpi, p.owner, p.iso_clauses) == (
            "Missed issues", "Findings closed", "QA Lead", ["9.2"],
        )

    @pytest.mark.parametrize("category", [None, "", "primary", 3, "CORE "])
    def test_invalid_category_becomes_core(self, category):
        p = normalize_generator_payload(_payload({"name": "X", "category": category})).processes[0]
        assert p.category == ProcessCategory.CORE

    def test_category_case_insensitive(self):
        p = normalize_generator_payload(_payload({"name": "X", "category": "Support"})).processes[0]
        assert p.category == ProcessCategory.SUPPORT

    def test_missing_fields_take_synthesizer_defaults(self):
        p = normalize_generator_payload(_payload({"name": "Sales"})).processes[0]
        assert p.inputs == [] and p.outputs == []
        assert p.risk == "Process failure risk"
        assert p.kpi == "Process performance metric"
        assert p.owner == "Sales Manager"
        assert p.iso_clauses == ["8.1", "8.2", "9.1"]

    def test_lists_truncated_to_four(self):
        items = [f"i{n}" for n in range(7)]
        p = normalize_generator_payload(
            _payload({"name": "X", "inputs": items, "outputs": items})
        ).processes[0]
        assert p.inputs == items[:4]
        assert p.outputs == items[:4]

    def test_non_string_list_items_dropped(self):
        p = normalize_generator_payload(
            _payload({"name": "X", "inputs": ["a", None, {"b": 1}, " ", 7]})
        ).processes[0]
        assert p.inputs == ["a", "7"]

    def test_nameless_process_gets_placeholder(self):
        p = normalize_generator_payload(_payload({"category": "core"})).processes[0]
        assert p.name == "Unnamed Process"

    def test_non_object_entry_normalized(self):
        p = normalize_generator_payload(_payload("just a string")).processes[0]
        assert p.name == "Unnamed Process"
        assert p.category == ProcessCategory.CORE


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------


class TestIdsAndNames:
    def test_positional_ids(self):
        pm = normalize_generator_payload(_payload({"name": "A"}, {"name": "B"}))
        assert [p.id for p in pm.processes] == ["1", "2"]

    def test_payload_ids_kept_when_unique(self):
        pm = normalize_generator_payload(_payload({"id": "p-a", "name": "A"}, {"id": "p-b", "name": "B"}))
        assert [p.id for p in pm.processes] == ["p-a", "p-b"]

    def test_duplicate_ids_replaced(self):
        pm = normalize_generator_payload(_payload({"id": "x", "name": "A"}, {"id": "x", "name": "B"}))
        ids = [p.id for p in pm.processes]
        assert len(set(ids)) == 2

    def test_duplicate_names_dropped(self):
        pm = normalize_generator_payload(
            _payload({"name": "A", "category": "core"}, {"name": "A", "category": "support"})
        )
        assert len(pm.processes) == 1
        assert pm.processes[0].category == ProcessCategory.CORE

    def test_next_id_after_generated_ids(self):
        pm = normalize_generator_payload(_payload({"name": "A"}, {"name": "B"}))
        assert pm.next_id == 3


# ---------------------------------------------------------------------------
# Interactions and process flow
# ---------------------------------------------------------------------------


class TestInteractionsAndFlow:
    def test_interactions_kept_even_if_dangling(self):
        pm = normalize_generator_payload(
            _payload({"name": "A"}, interactions=[{"from": "A", "to": "Ghost", "description": "d"}])
        )
        (i,) = pm.interactions
        assert (i.from_, i.to, i.description) == ("A", "Ghost", "d")

    def test_missing_interaction_fields_become_empty(self):
        pm = normalize_generator_payload(_payload({"name": "A"}, interactions=[{"from": "A"}, "bad"]))
        (i,) = pm.interactions
        assert (i.to, i.description) == ("", "")

    def test_interactions_not_a_list(self):
        pm = normalize_generator_payload(_payload({"name": "A"}, interactions="none"))
        assert pm.interactions == []

    def test_valid_flow_kept(self):
        flow = {
            "primaryFlow": ["A"],
            "supportingFlows": [{"name": "Support", "processes": ["B"]}],
            "feedbackLoops": [{"from": "A", "to": "A", "description": "loop"}],
        }
        pm = normalize_generator_payload(_payload({"name": "A"}, flow=flow))
        assert pm.process_flow.primary_flow == ["A"]
        assert pm.process_flow.feedback_loops[0].from_ == "A"

    def test_malformed_flow_dropped(self):
        pm = normalize_generator_payload(_payload({"name": "A"}, flow={"primaryFlow": "A then B"}))
        assert pm.process_flow is None
