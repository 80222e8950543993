"""Tests for health evaluation of monitor tool results."""

import json

import pytest
from mcp.types import CallToolResult

from conftest import image_block, text_result
from escalator.escalation import HealthEvaluator, is_actionable
from escalator.models import VerdictSource


def buckets_json(*values) -> str:
    return json.dumps({"results": {"results": [{"timeSeries": [{"avgBuckets": list(values)}]}]}})


def records_json(*averages) -> str:
    data = [{"timeStamp": f"2025-01-01T00:0{i}:00Z", "average": a} for i, a in enumerate(averages)]
    return json.dumps({"results": {"results": [{"timeSeries": [{"data": data}]}]}})


class TestFailClosed:
    """Absent evidence is unhealthy."""

    def setup_method(self):
        self.evaluator = HealthEvaluator()

    def test_none_result_is_unhealthy(self):
        verdict = self.evaluator.classify(None, "rg-opsweaver-hackathon")

        assert verdict.healthy is False
        assert verdict.source == VerdictSource.EMPTY

    def test_empty_content_is_unhealthy(self):
        verdict = self.evaluator.classify(CallToolResult(content=[]), "anything")

        assert verdict.healthy is False
        assert verdict.evidence == ""

    def test_is_healthy_shorthand(self):
        assert self.evaluator.is_healthy(None, "x") is False
        assert self.evaluator.is_healthy(text_result("x is here"), "x") is True


class TestThresholdMetrics:
    """Numeric telemetry is compared against the threshold."""

    def setup_method(self):
        self.evaluator = HealthEvaluator(threshold=80.0)

    def test_last_bucket_above_threshold_is_unhealthy(self):
        verdict = self.evaluator.classify(text_result(buckets_json(10, 20, 95.5)), "any")

        assert verdict.healthy is False
        assert verdict.source == VerdictSource.BUCKETS
        assert verdict.value == 95.5

    def test_last_bucket_below_threshold_is_healthy(self):
        verdict = self.evaluator.classify(text_result(buckets_json(10, 20, 15.5)), "any")

        assert verdict.healthy is True
        assert verdict.value == 15.5

    def test_only_last_bucket_counts(self):
        verdict = self.evaluator.classify(text_result(buckets_json(99, 99, 10)), "any")

        assert verdict.healthy is True

    def test_exactly_threshold_is_unhealthy(self):
        verdict = self.evaluator.classify(text_result(buckets_json(80.0)), "any")

        assert verdict.healthy is False

    def test_integer_bucket_values(self):
        assert self.evaluator.is_healthy(text_result(buckets_json(79)), "any") is True
        assert self.evaluator.is_healthy(text_result(buckets_json(80)), "any") is False

    def test_record_average_above_threshold_is_unhealthy(self):
        verdict = self.evaluator.classify(text_result(records_json(85.0)), "any")

        assert verdict.healthy is False
        assert verdict.source == VerdictSource.RECORDS
        assert verdict.value == 85.0

    def test_last_record_average_below_threshold_is_healthy(self):
        verdict = self.evaluator.classify(text_result(records_json(90.0, 12.25)), "any")

        assert verdict.healthy is True
        assert verdict.value == 12.25

    def test_buckets_take_priority_over_records(self):
        payload = json.dumps(
            {
                "results": {
                    "results": [
                        {"timeSeries": [{"avgBuckets": [5.0], "data": [{"average": 99.0}]}]}
                    ]
                }
            }
        )

        verdict = self.evaluator.classify(text_result(payload), "any")

        assert verdict.healthy is True
        assert verdict.source == VerdictSource.BUCKETS

    def test_custom_threshold(self):
        evaluator = HealthEvaluator(threshold=50.0)

        assert evaluator.is_healthy(text_result(buckets_json(49.9)), "any") is True
        assert evaluator.is_healthy(text_result(buckets_json(50.0)), "any") is False

    def test_evidence_is_kept(self):
        payload = buckets_json(1, 2, 3)

        verdict = self.evaluator.classify(text_result(payload), "any")

        assert verdict.evidence == payload


class TestPresenceFallback:
    """Non-metric results fall back to a presence check on the target."""

    def setup_method(self):
        self.evaluator = HealthEvaluator()

    def test_target_present_is_healthy(self):
        verdict = self.evaluator.classify(text_result("Found resource: rg-x"), "rg-x")

        assert verdict.healthy is True
        assert verdict.source == VerdictSource.PRESENCE

    def test_target_missing_is_unhealthy(self):
        verdict = self.evaluator.classify(
            text_result("No resources found."), "rg-opsweaver-hackathon"
        )

        assert verdict.healthy is False

    def test_target_in_second_block(self):
        result = text_result("Resource groups:", "rg-a\nrg-opsweaver-hackathon")

        assert self.evaluator.is_healthy(result, "rg-opsweaver-hackathon") is True

    def test_non_text_blocks_are_stringified(self):
        result = CallToolResult(content=[image_block()])

        verdict = self.evaluator.classify(result, "rg-x")

        assert verdict.healthy is False
        assert "image/png" in verdict.evidence

    @pytest.mark.parametrize(
        "payload",
        [
            '{"results": {"results": []}}',
            '{"results": {"results": [{"timeSeries": [{"avgBuckets": []}]}]}}',
            '{"results": {"results": [{"timeSeries": [{"avgBuckets": ["high"]}]}]}}',
            '{"results": {"results": [{"timeSeries": [{"avgBuckets": [true]}]}]}}',
            '{"results": {"results": [{"timeSeries": [{"data": [{"minimum": 1}]}]}]}}',
            '{"results": {"results": [{"timeSeries": [{"other": 1}]}]}}',
            '["not", "an", "object"]',
            "{broken json",
        ],
    )
    def test_unrecognized_structure_falls_back(self, payload):
        evaluator = HealthEvaluator()

        healthy_result = text_result(payload + " target-1")
        missing_result = text_result(payload)

        assert evaluator.classify(missing_result, "target-1").healthy is False
        assert evaluator.classify(missing_result, "target-1").source == VerdictSource.PRESENCE
        assert evaluator.classify(healthy_result, "target-1").source == VerdictSource.PRESENCE

    def test_oversized_bucket_value_falls_back(self):
        payload = (
            '{"name": "rg-x", "results": {"results": [{"timeSeries": [{"avgBuckets": [1'
            + "0" * 400
            + "]}]}]}}"
        )

        verdict = self.evaluator.classify(text_result(payload), "rg-x")

        assert verdict.source == VerdictSource.PRESENCE
        assert verdict.value is None
        assert verdict.healthy is True
        assert self.evaluator.is_healthy(text_result(payload), "rg-y") is False

    @pytest.mark.parametrize("literal", ["Infinity", "-Infinity", "NaN"])
    def test_non_finite_values_fall_back(self, literal):
        payload = (
            '{"results": {"results": [{"timeSeries": [{"data": [{"average": '
            + literal
            + "}]}]}]}}"
        )

        verdict = self.evaluator.classify(text_result(payload), "rg-x")

        assert verdict.source == VerdictSource.PRESENCE
        assert verdict.healthy is False

    def test_structure_without_metrics_uses_presence(self):
        payload = '{"results": {"results": [{"timeSeries": [{"name": "rg-x"}]}]}}'

        assert self.evaluator.is_healthy(text_result(payload), "rg-x") is True

    def test_empty_target_is_unhealthy(self):
        assert self.evaluator.is_healthy(text_result("something"), "") is False


class TestActionableReports:
    """Tests for root cause report classification."""

    def test_concrete_report_is_actionable(self):
        assert is_actionable("RCA: Database lock detected.") is True

    def test_inconclusive_marker_is_not_actionable(self):
        assert is_actionable("No root cause identified.") is False
        assert is_actionable("After review: No root cause identified in logs") is False

    @pytest.mark.parametrize("report", ["", "   ", "\n\t", None])
    def test_blank_report_is_not_actionable(self, report):
        assert is_actionable(report) is False

    def test_custom_marker(self):
        assert is_actionable("INCONCLUSIVE", marker="INCONCLUSIVE") is False
        assert is_actionable("No root cause identified", marker="INCONCLUSIVE") is True
