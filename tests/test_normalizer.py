import pytest

from keyforge.analyzers.normalizer import (
    LABELS,
    LEVEL_FUNCTIONS,
    RECOMMENDATIONS,
    StrengthNormalizer,
    checklist_level,
    entropy_level,
    heuristic_level,
    named_level,
    policy_level,
)
from keyforge.core.models import EstimatorKind, EstimatorResult


def test_heuristic_levels():
    assert [heuristic_level(s, {}) for s in range(5)] == [0, 1, 2, 3, 3]


def test_policy_levels_require_baseline():
    assert policy_level(5, {"meets_baseline": True}) == 3
    assert policy_level(4, {"meets_baseline": True}) == 2
    assert policy_level(3, {"meets_baseline": True}) == 1
    assert policy_level(5, {"meets_baseline": False}) == 0
    assert policy_level(2, {"meets_baseline": True}) == 0


def test_named_levels():
    assert named_level("VERY_WEAK", {}) == 0
    assert named_level("WEAK", {}) == 1
    assert named_level("REASONABLE", {}) == 2
    assert named_level("MEDIUM", {}) == 2
    assert named_level("STRONG", {}) == 3
    assert named_level("VERY_STRONG", {}) == 3
    assert named_level("SOMETHING_NEW", {}) == 0


def test_checklist_levels():
    assert checklist_level(True, {"errors_count": 0, "warnings_count": 0}) == 3
    assert checklist_level(True, {"errors_count": 0, "warnings_count": 2}) == 2
    assert checklist_level(False, {"errors_count": 1, "warnings_count": 0}) == 1
    assert checklist_level(False, {"errors_count": 2, "warnings_count": 0}) == 1
    assert checklist_level(False, {"errors_count": 3, "warnings_count": 0}) == 0
    assert checklist_level(False, {"errors": [], "warnings": []}) == 0


def test_entropy_thresholds():
    assert entropy_level(0.0, {}) == 0
    assert entropy_level(34.99, {}) == 0
    assert entropy_level(35.0, {}) == 1
    assert entropy_level(50.0, {}) == 2
    assert entropy_level(69.9, {}) == 2
    assert entropy_level(70.0, {}) == 3


def test_normalize_builds_fixed_verdict():
    result = EstimatorResult.success(
        EstimatorKind.POLICY_ENTROPY, 5, {"meets_baseline": True}
    )
    verdict = StrengthNormalizer().normalize(result)
    assert verdict.level == 3
    assert verdict.label == LABELS[3]
    assert verdict.recommendation == "Excellent (Meets all basic criteria)"


def test_failure_has_no_verdict():
    result = EstimatorResult.failure(EstimatorKind.RAW_ENTROPY, "timeout")
    assert StrengthNormalizer().normalize(result) is None


def test_normalize_all_skips_failures():
    results = [
        EstimatorResult.success(EstimatorKind.HEURISTIC_CRACKABILITY, 1, {}),
        EstimatorResult.failure(EstimatorKind.NAMED_STRENGTH, "boom"),
        EstimatorResult.success(EstimatorKind.RAW_ENTROPY, 80.0, {}),
    ]
    verdicts = StrengthNormalizer().normalize_all(results)
    assert set(verdicts) == {EstimatorKind.HEURISTIC_CRACKABILITY, EstimatorKind.RAW_ENTROPY}
    assert verdicts[EstimatorKind.HEURISTIC_CRACKABILITY].label == "Okay"
    assert verdicts[EstimatorKind.RAW_ENTROPY].label == "Strong"


def test_out_of_range_levels_are_clamped():
    levels = dict(LEVEL_FUNCTIONS)
    levels[EstimatorKind.HEURISTIC_CRACKABILITY] = lambda score, details: 9
    result = EstimatorResult.success(EstimatorKind.HEURISTIC_CRACKABILITY, 4, {})
    assert StrengthNormalizer(levels=levels).normalize(result).level == 3


def test_incomplete_tables_are_rejected():
    levels = dict(LEVEL_FUNCTIONS)
    del levels[EstimatorKind.NAMED_STRENGTH]
    with pytest.raises(ValueError, match="named_strength"):
        StrengthNormalizer(levels=levels)

    recs = dict(RECOMMENDATIONS)
    del recs[EstimatorKind.RAW_ENTROPY]
    with pytest.raises(ValueError, match="raw_entropy"):
        StrengthNormalizer(recommendations=recs)


def test_every_kind_has_four_recommendations():
    for kind in EstimatorKind:
        assert len(RECOMMENDATIONS[kind]) == 4
