import pytest

from keyforge.analyzers.external import (
    ChecklistPolicyEstimator,
    EntropySection,
    HeuristicCrackabilityEstimator,
    NamedStrengthClassifier,
    RawEntropyEstimator,
    parse_section,
)
from keyforge.analyzers.normalizer import StrengthNormalizer
from keyforge.core.errors import EstimatorFailure
from keyforge.core.models import BackendResponse, EstimatorKind, Failure, Success


def _respond(payload):
    return BackendResponse(payload=payload)


def test_heuristic_reads_score_and_feedback(sample_payload):
    sample_payload["zxcvbn"]["feedback"] = {
        "warning": "This is a top-10 common password",
        "suggestions": ["Add another word or two"],
    }
    result = HeuristicCrackabilityEstimator().evaluate("x", _respond(sample_payload))
    assert result.estimator is EstimatorKind.HEURISTIC_CRACKABILITY
    assert result.outcome.native_score == 4
    assert result.outcome.details["warning"].startswith("This is")
    assert result.outcome.details["suggestions"] == ["Add another word or two"]


def test_heuristic_rejects_out_of_range_score(sample_payload):
    sample_payload["zxcvbn"]["score"] = 7
    result = HeuristicCrackabilityEstimator().evaluate("x", _respond(sample_payload))
    assert isinstance(result.outcome, Failure)
    assert "unparseable 'zxcvbn' section" in result.outcome.reason


def test_heuristic_rejects_stringly_typed_score(sample_payload):
    sample_payload["zxcvbn"]["score"] = "4"
    result = HeuristicCrackabilityEstimator().evaluate("x", _respond(sample_payload))
    assert not result.ok


def test_checklist_defaults_errors_from_test_lists(sample_payload):
    sample_payload["owasp_npm"] = {
        "strong": False,
        "requiredTestErrors": ["The password must be at least 10 characters long."],
        "optionalTestErrors": ["The password must contain at least one number."],
    }
    result = ChecklistPolicyEstimator().evaluate("x", _respond(sample_payload))
    details = result.outcome.details
    assert result.outcome.native_score is False
    assert details["errors_count"] == 2
    assert details["warnings_count"] == 0
    assert details["warnings"] == []


def test_strong_checklist_without_warnings_key_is_top_level(sample_payload):
    sample_payload["owasp_npm"] = {
        "strong": True,
        "errors": ["The password must contain at least one uppercase letter."],
        "optionalTestErrors": ["The password must contain at least one uppercase letter."],
    }
    result = ChecklistPolicyEstimator().evaluate("x", _respond(sample_payload))
    verdict = StrengthNormalizer().normalize(result)
    assert result.outcome.details["warnings_count"] == 0
    assert verdict.level == 3
    assert verdict.recommendation == "Excellent (Passes all OWASP npm tests)"


def test_checklist_prefers_explicit_errors(sample_payload):
    sample_payload["owasp_npm"]["errors"] = ["one"]
    sample_payload["owasp_npm"]["warnings"] = []
    details = ChecklistPolicyEstimator().evaluate("x", _respond(sample_payload)).outcome.details
    assert details["errors"] == ["one"]
    assert details["warnings_count"] == 0


def test_named_strength_reports_code(sample_payload):
    result = NamedStrengthClassifier().evaluate("x", _respond(sample_payload))
    assert result.outcome.native_score == "STRONG"
    assert result.outcome.details["trigraph_entropy_bits"] == 72.1


def test_named_strength_error_section_is_failure(sample_payload):
    sample_payload["tai"] = {"error": "tai crashed", "details": "stack overflow"}
    result = NamedStrengthClassifier().evaluate("x", _respond(sample_payload))
    assert result.outcome == Failure(reason="tai crashed: stack overflow")


def test_raw_entropy_takes_weakest_formula(sample_payload):
    result = RawEntropyEstimator().evaluate("x", _respond(sample_payload))
    assert result.outcome.native_score == 61.0
    assert result.outcome.details["bits"] == {"fast_entropy": 78.4, "string_entropy": 61.0}
    assert result.outcome.details["unavailable"] == {}


def test_raw_entropy_survives_one_missing_formula(sample_payload):
    del sample_payload["string_entropy"]
    result = RawEntropyEstimator().evaluate("x", _respond(sample_payload))
    assert isinstance(result.outcome, Success)
    assert result.outcome.native_score == 78.4
    assert "string_entropy" in result.outcome.details["unavailable"]


def test_raw_entropy_fails_when_both_formulas_missing(sample_payload):
    del sample_payload["fast_entropy"]
    sample_payload["string_entropy"] = {"error": "module not found"}
    result = RawEntropyEstimator().evaluate("x", _respond(sample_payload))
    assert isinstance(result.outcome, Failure)
    assert result.outcome.reason == "'fast_entropy' missing from helper output; module not found"


@pytest.mark.parametrize(
    "estimator",
    [
        HeuristicCrackabilityEstimator(),
        ChecklistPolicyEstimator(),
        NamedStrengthClassifier(),
        RawEntropyEstimator(),
    ],
)
def test_failed_response_is_reported_by_every_external_estimator(estimator):
    result = estimator.evaluate("x", BackendResponse.failed("timeout"))
    assert result.outcome == Failure(reason="timeout")

    result = estimator.evaluate("x", None)
    assert not result.ok


def test_parse_section_missing_key():
    with pytest.raises(EstimatorFailure, match="'fast_entropy' missing"):
        parse_section({}, "fast_entropy", EntropySection)


def test_parse_section_rejects_negative_bits():
    with pytest.raises(EstimatorFailure, match="shannonEntropyBits"):
        parse_section({"k": {"shannonEntropyBits": -1}}, "k", EntropySection)
