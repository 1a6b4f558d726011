"""Tests for the Recommendation Orchestrator.

All tests use a MagicMock provider.  No model server required.
"""

from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

import pytest

from greenbuild.catalog import default_catalog
from greenbuild.engine import BuildingSpec, compute_bill
from greenbuild.errors import (
    PermanentProviderError,
    RateLimitedError,
    ResponseParseError,
    ResponseValidationError,
    TransientProviderError,
)
from greenbuild.providers.base import GenerativeModelProvider
from greenbuild.recommendation import (
    MAX_ATTEMPTS,
    RETRY_BACKOFF_SECONDS,
    Durability,
    FailureKind,
    RecommendationOrchestrator,
    RecommendationResult,
    RecommendationUnavailable,
    build_recommendation_prompt,
    extract_json_object,
    parse_recommendation,
)

PAYLOAD = {
    "hotspots": [
        {"material": "Aluminium (Virgin)", "reason": "Highest carbon per kg in the mix"},
        {"material": "Brick", "reason": "Largest envelope mass"},
    ],
    "optimizations": [
        {
            "title": "Switch to recycled aluminium",
            "action": "Replace Aluminium (Virgin) cladding with Aluminium (Recycled)",
            "carbonSavingTons": 15.37,
            "costDeltaUsd": 420.0,
            "durability": "High",
            "technicalExplanation": "Secondary smelting uses ~5% of primary energy.",
            "tradeoff": "Saves 86% of cladding carbon for 9% more cost",
        },
        {
            "title": "Recycled steel frame",
            "action": "Replace Steel (Virgin) with Steel (Recycled)",
            "carbonSavingTons": 13.09,
            "costDeltaUsd": 1050.0,
            "durability": "High",
            "technicalExplanation": "EAF production from scrap.",
            "tradeoff": "Large saving, modest premium",
        },
        {
            "title": "Low-carbon concrete",
            "action": "Replace Concrete (Standard) with Concrete (Low-Carbon)",
            "carbonSavingTons": 5.6,
            "costDeltaUsd": 2240.0,
            "durability": "Medium",
            "technicalExplanation": "Cement replacement with GGBS.",
            "tradeoff": "Slower early strength gain",
        },
    ],
    "impactSummary": "Three swaps cut embodied carbon by roughly 39%.",
    "policyInsight": "LEED v4.1 MRc2 rewards embodied carbon reductions.",
}

# Nesting far beyond the interpreter's recursion limit
DEEPLY_NESTED = '{"hotspots": ' + "[" * 200_000 + "]" * 200_000 + "}"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def spec() -> BuildingSpec:
    return BuildingSpec(building_type="House", area=2500, floors=2, location="Denver, CO")


@pytest.fixture
def bill(spec):
    return compute_bill(spec, default_catalog(), 0)


@pytest.fixture
def provider() -> MagicMock:
    return MagicMock(spec=GenerativeModelProvider)


@pytest.fixture
def sleep() -> MagicMock:
    return MagicMock()


@pytest.fixture
def orchestrator(provider, sleep) -> RecommendationOrchestrator:
    return RecommendationOrchestrator(provider, sleep=sleep, timeout=5.0)


# ---------------------------------------------------------------------------
# Object extraction
# ---------------------------------------------------------------------------

class TestExtractJsonObject:

    def test_plain_object(self):
        assert extract_json_object('{"a": 1}') == '{"a": 1}'

    def test_code_fence(self):
        raw = '```json\n{"a": {"b": 2}}\n```'
        assert extract_json_object(raw) == '{"a": {"b": 2}}'

    def test_commentary_around_object(self):
        raw = 'Here is my analysis:\n{"a": 1}\nHope this helps!'
        assert extract_json_object(raw) == '{"a": 1}'

    def test_no_object(self):
        with pytest.raises(ResponseParseError):
            extract_json_object("I cannot help with that.")

    def test_closing_before_opening(self):
        with pytest.raises(ResponseParseError):
            extract_json_object("} nothing {")

    def test_empty(self):
        with pytest.raises(ResponseParseError):
            extract_json_object("")
        with pytest.raises(ResponseParseError):
            extract_json_object(None)


# ---------------------------------------------------------------------------
# Parsing and repair
# ---------------------------------------------------------------------------

class TestParseRecommendation:

    def test_valid_payload(self):
        result = parse_recommendation(json.dumps(PAYLOAD))
        assert isinstance(result, RecommendationResult)
        assert len(result.optimizations) == 3
        assert result.optimizations[0].carbon_saving_tons == pytest.approx(15.37)
        assert result.optimizations[2].durability is Durability.MEDIUM
        assert result.hotspots[0].material == "Aluminium (Virgin)"
        assert result.policy_insight.startswith("LEED")

    def test_wrapped_payload(self):
        raw = f"Sure! Here's the analysis you asked for.\n```json\n{json.dumps(PAYLOAD)}\n```\nLet me know."
        result = parse_recommendation(raw)
        assert result.impact_summary == PAYLOAD["impactSummary"]

    def test_invalid_json(self):
        with pytest.raises(ResponseParseError):
            parse_recommendation('{"hotspots": [,]}')

    def test_deep_nesting_is_parse_error(self):
        with pytest.raises(ResponseParseError):
            parse_recommendation(DEEPLY_NESTED)

    def test_missing_optimizations(self):
        with pytest.raises(ResponseValidationError):
            parse_recommendation('{"hotspots": []}')

    def test_bad_durability(self):
        payload = json.loads(json.dumps(PAYLOAD))
        payload["optimizations"][0]["durability"] = "Forever"
        with pytest.raises(ResponseValidationError):
            parse_recommendation(json.dumps(payload))

    def test_top_level_array_rejected(self):
        with pytest.raises(ResponseParseError):
            parse_recommendation("[1, 2, 3]")

    def test_repairs(self):
        payload = json.loads(json.dumps(PAYLOAD))
        payload["hotspots"] = ["Steel (Virgin)"]
        payload["optimizations"][0]["durability"] = " high "
        payload["optimizations"][0]["carbonSavingTons"] = "15.4 tons"
        payload["optimizations"][0]["costDeltaUsd"] = "$1,200"
        payload["policyInsight"] = None
        result = parse_recommendation(json.dumps(payload))
        opt = result.optimizations[0]
        assert opt.durability is Durability.HIGH
        assert opt.carbon_saving_tons == pytest.approx(15.4)
        assert opt.cost_delta_usd == pytest.approx(1200.0)
        assert result.hotspots[0].material == "Steel (Virgin)"
        assert result.hotspots[0].reason == ""
        assert result.policy_insight == ""

    def test_unexpected_count_is_accepted(self, caplog):
        payload = dict(PAYLOAD, optimizations=PAYLOAD["optimizations"][:2])
        result = parse_recommendation(json.dumps(payload))
        assert len(result.optimizations) == 2
        assert "Expected 3 optimizations" in caplog.text

    def test_to_dict_round_trips_wire_names(self):
        data = parse_recommendation(json.dumps(PAYLOAD)).to_dict()
        assert data["optimizations"][0]["carbonSavingTons"] == pytest.approx(15.37)
        assert data["impactSummary"] == PAYLOAD["impactSummary"]


# ---------------------------------------------------------------------------
# Grounding prompt
# ---------------------------------------------------------------------------

class TestPrompt:

    def test_contains_spec(self, spec, bill):
        prompt = build_recommendation_prompt(spec, bill, default_catalog())
        assert "Type: House" in prompt
        assert "Area: 2500 sq ft" in prompt
        assert "Location: Denver, CO" in prompt
        assert "Cost Sensitivity: Medium" in prompt

    def test_contains_every_allocation(self, spec, bill):
        prompt = build_recommendation_prompt(spec, bill, default_catalog())
        for alloc in bill.allocations:
            assert f"{alloc.material_name} ({alloc.role.value})" in prompt
        assert "112000 kg" in prompt

    def test_contains_entire_catalog(self, spec, bill):
        catalog = default_catalog()
        prompt = build_recommendation_prompt(spec, bill, catalog)
        for rec in catalog:
            assert f"- {rec.name} [" in prompt
        assert "OpenLCA" in prompt

    def test_grounding_rules_and_schema(self, spec, bill):
        prompt = build_recommendation_prompt(spec, bill, default_catalog())
        assert "Only use materials listed under AVAILABLE MATERIALS" in prompt
        assert "carbonSavingTons" in prompt
        assert '"High"' in prompt


# ---------------------------------------------------------------------------
# Orchestration and retry
# ---------------------------------------------------------------------------

class TestOrchestrator:

    def test_policy_constants(self):
        assert MAX_ATTEMPTS == 2
        assert 1.5 <= RETRY_BACKOFF_SECONDS <= 2.0

    def test_success_first_attempt(self, orchestrator, provider, sleep, spec, bill):
        provider.generate.return_value = json.dumps(PAYLOAD)
        outcome = orchestrator.recommend(spec, bill, default_catalog())
        assert isinstance(outcome, RecommendationResult)
        assert outcome.available
        assert provider.generate.call_count == 1
        sleep.assert_not_called()

    def test_schema_and_timeout_passed(self, orchestrator, provider, spec, bill):
        provider.generate.return_value = json.dumps(PAYLOAD)
        orchestrator.recommend(spec, bill, default_catalog())
        _, kwargs = provider.generate.call_args
        assert kwargs["timeout"] == 5.0
        assert "optimizations" in kwargs["schema"]["properties"]

    def test_wrapped_response(self, orchestrator, provider, spec, bill):
        provider.generate.return_value = (
            "Based on the data, here are my recommendations:\n\n"
            f"{json.dumps(PAYLOAD)}\n\nThese figures use the supplied quantities."
        )
        outcome = orchestrator.recommend(spec, bill, default_catalog())
        assert isinstance(outcome, RecommendationResult)
        assert outcome.optimizations[0].title == "Switch to recycled aluminium"

    def test_two_transient_failures_return_unavailable(self, orchestrator, provider, sleep, spec, bill):
        catalog = default_catalog()
        before = compute_bill(spec, catalog, 0)
        provider.generate.side_effect = [
            TransientProviderError("connection reset"),
            TransientProviderError("connection reset"),
        ]
        outcome = orchestrator.recommend(spec, bill, catalog)
        assert isinstance(outcome, RecommendationUnavailable)
        assert not outcome.available
        assert outcome.attempts == 2
        assert outcome.failures == [FailureKind.NETWORK, FailureKind.NETWORK]
        assert provider.generate.call_count == 2
        sleep.assert_called_once_with(RETRY_BACKOFF_SECONDS)
        assert compute_bill(spec, catalog, 0) == before == bill

    def test_retry_then_success(self, orchestrator, provider, sleep, spec, bill):
        provider.generate.side_effect = [RateLimitedError(), json.dumps(PAYLOAD)]
        outcome = orchestrator.recommend(spec, bill, default_catalog())
        assert isinstance(outcome, RecommendationResult)
        assert provider.generate.call_count == 2
        sleep.assert_called_once()

    def test_parse_failure_is_retried(self, orchestrator, provider, spec, bill):
        provider.generate.side_effect = ["no json at all", json.dumps(PAYLOAD)]
        outcome = orchestrator.recommend(spec, bill, default_catalog())
        assert isinstance(outcome, RecommendationResult)

    def test_validation_failures(self, orchestrator, provider, spec, bill):
        provider.generate.return_value = '{"hotspots": []}'
        outcome = orchestrator.recommend(spec, bill, default_catalog())
        assert isinstance(outcome, RecommendationUnavailable)
        assert outcome.failures == [FailureKind.VALIDATION, FailureKind.VALIDATION]

    def test_failure_classification(self, orchestrator, provider, spec, bill):
        provider.generate.side_effect = [
            TransientProviderError("slow", timeout=True),
            TransientProviderError("HTTP 503", status=503),
        ]
        outcome = orchestrator.recommend(spec, bill, default_catalog())
        assert outcome.failures == [FailureKind.TIMEOUT, FailureKind.HTTP_STATUS]
        assert "503" in outcome.reason

    def test_rate_limit_exhausted(self, orchestrator, provider, spec, bill):
        provider.generate.side_effect = [RateLimitedError(), RateLimitedError()]
        outcome = orchestrator.recommend(spec, bill, default_catalog())
        assert outcome.failures == [FailureKind.RATE_LIMITED, FailureKind.RATE_LIMITED]

    def test_permanent_failure_not_retried(self, orchestrator, provider, sleep, spec, bill):
        provider.generate.side_effect = PermanentProviderError("no server configured")
        outcome = orchestrator.recommend(spec, bill, default_catalog())
        assert isinstance(outcome, RecommendationUnavailable)
        assert outcome.attempts == 1
        assert outcome.failures == [FailureKind.PERMANENT]
        sleep.assert_not_called()

    def test_unexpected_exception_absorbed(self, orchestrator, provider, spec, bill):
        provider.generate.side_effect = RuntimeError("SDK exploded")
        outcome = orchestrator.recommend(spec, bill, default_catalog())
        assert isinstance(outcome, RecommendationUnavailable)
        assert "SDK exploded" in outcome.reason

    def test_deeply_nested_response_absorbed(self, orchestrator, provider, spec, bill):
        provider.generate.return_value = DEEPLY_NESTED
        outcome = orchestrator.recommend(spec, bill, default_catalog())
        assert isinstance(outcome, RecommendationUnavailable)
        assert outcome.failures == [FailureKind.PARSE, FailureKind.PARSE]

    def test_unexpected_parser_error_absorbed(self, orchestrator, provider, spec, bill):
        provider.generate.return_value = json.dumps(PAYLOAD)
        with patch(
            "greenbuild.recommendation.orchestrator.parse_recommendation",
            side_effect=RecursionError("maximum recursion depth exceeded"),
        ):
            outcome = orchestrator.recommend(spec, bill, default_catalog())
        assert isinstance(outcome, RecommendationUnavailable)
        assert outcome.failures == [FailureKind.PARSE, FailureKind.PARSE]
        assert "RecursionError" in outcome.reason

    def test_custom_attempt_ceiling(self, provider, sleep, spec, bill):
        orchestrator = RecommendationOrchestrator(provider, max_attempts=3, backoff_seconds=0.1, sleep=sleep)
        provider.generate.side_effect = TransientProviderError("down")
        outcome = orchestrator.recommend(spec, bill, default_catalog())
        assert outcome.attempts == 3
        assert sleep.call_count == 2

    def test_no_placeholder_data_on_failure(self, orchestrator, provider, spec, bill):
        provider.generate.side_effect = TransientProviderError("down")
        outcome = orchestrator.recommend(spec, bill, default_catalog())
        assert not hasattr(outcome, "optimizations")
        assert set(outcome.to_dict()) == {"reason", "attempts", "failures"}
