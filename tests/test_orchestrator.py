import asyncio
import json
import time

import pytest

from keyforge.analyzers.policy import PolicyEntropyEstimator
from keyforge.collectors.backends import AnalysisBackend, SubprocessBackend
from keyforge.core.errors import BackendError, OrchestratorUnavailableError
from keyforge.core.models import EstimatorKind, Failure, Success
from keyforge.core.orchestrator import AnalysisOrchestrator, default_estimators


class StaticBackend(AnalysisBackend):
    name = "static"

    def __init__(self, payload=None, exc=None, delay=0.0):
        self.payload = payload
        self.exc = exc
        self.delay = delay
        self.calls = []

    async def fetch(self, secret):
        self.calls.append(secret)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.exc is not None:
            raise self.exc
        return self.payload


def _analyze(orchestrator, secret="Password1!"):
    return asyncio.run(orchestrator.analyze(secret))


def _external_failures(report):
    return {
        kind: result.outcome.reason
        for kind, result in report.results.items()
        if isinstance(result.outcome, Failure)
    }


def test_full_payload_yields_five_verdicts(sample_payload):
    backend = StaticBackend(sample_payload)
    report = _analyze(AnalysisOrchestrator(backend))

    assert list(report.results) == list(EstimatorKind)
    assert report.success_count == 5
    assert backend.calls == ["Password1!"]
    assert report.secret_length == 10

    levels = {kind: v.level for kind, v in report.verdicts.items()}
    assert levels == {
        EstimatorKind.POLICY_ENTROPY: 3,
        EstimatorKind.HEURISTIC_CRACKABILITY: 3,
        EstimatorKind.CHECKLIST_POLICY: 3,
        EstimatorKind.NAMED_STRENGTH: 3,
        EstimatorKind.RAW_ENTROPY: 2,
    }


def test_empty_helper_output_keeps_local_result(make_helper):
    backend = SubprocessBackend(make_helper(stdout=""), local_zxcvbn=False)
    report = _analyze(AnalysisOrchestrator(backend, timeout=30))

    assert len(report.results) == 5
    assert report.success_count == 1
    assert report.results[EstimatorKind.POLICY_ENTROPY].ok
    failures = _external_failures(report)
    assert set(failures) == {k for k in EstimatorKind if k.is_external}
    assert all("empty output" in reason for reason in failures.values())
    assert set(report.verdicts) == {EstimatorKind.POLICY_ENTROPY}


def test_timeout_is_reported_once_per_external_estimator():
    backend = StaticBackend({}, delay=30)
    started = time.monotonic()
    report = _analyze(AnalysisOrchestrator(backend, timeout=0.2))

    assert time.monotonic() - started < 5
    assert set(_external_failures(report).values()) == {"timeout"}
    assert report.results[EstimatorKind.POLICY_ENTROPY].ok
    assert len(backend.calls) == 1


def test_backend_error_message_is_propagated():
    backend = StaticBackend(exc=BackendError("analysis helper exited with status 3"))
    report = _analyze(AnalysisOrchestrator(backend))
    assert set(_external_failures(report).values()) == {"analysis helper exited with status 3"}


def test_unexpected_backend_exception_is_absorbed():
    backend = StaticBackend(exc=RuntimeError("kaboom"))
    report = _analyze(AnalysisOrchestrator(backend))
    assert set(_external_failures(report).values()) == {"RuntimeError: kaboom"}


def test_non_object_payload_is_a_failure():
    report = _analyze(AnalysisOrchestrator(StaticBackend(["not", "a", "dict"])))
    reasons = set(_external_failures(report).values())
    assert len(reasons) == 1
    assert "expected a JSON object" in reasons.pop()


def test_one_bad_section_does_not_affect_others(sample_payload):
    sample_payload["tai"] = {"error": "tai unavailable"}
    report = _analyze(AnalysisOrchestrator(StaticBackend(sample_payload)))
    assert _external_failures(report) == {EstimatorKind.NAMED_STRENGTH: "tai unavailable"}
    assert report.success_count == 4


def test_policy_failure_makes_orchestrator_unavailable(monkeypatch, sample_payload):
    estimators = default_estimators()
    policy = estimators[EstimatorKind.POLICY_ENTROPY]

    def boom(secret):
        raise ArithmeticError("bad math")

    monkeypatch.setattr(policy, "measure", boom)
    backend = StaticBackend(sample_payload)
    orchestrator = AnalysisOrchestrator(backend, estimators=estimators)

    with pytest.raises(OrchestratorUnavailableError, match="bad math"):
        _analyze(orchestrator)
    assert backend.calls == []


def test_registry_must_cover_every_kind():
    estimators = default_estimators()
    del estimators[EstimatorKind.RAW_ENTROPY]
    with pytest.raises(ValueError, match="raw_entropy"):
        AnalysisOrchestrator(StaticBackend({}), estimators=estimators)


def test_policy_slot_requires_policy_estimator():
    estimators = default_estimators()
    estimators[EstimatorKind.POLICY_ENTROPY] = estimators[EstimatorKind.RAW_ENTROPY]
    with pytest.raises(TypeError):
        AnalysisOrchestrator(StaticBackend({}), estimators=estimators)


def test_report_serialises_to_json(sample_payload):
    report = _analyze(AnalysisOrchestrator(StaticBackend(sample_payload)))
    data = json.loads(report.model_dump_json())
    assert data["results"]["policy_entropy"]["outcome"]["status"] == "success"
    assert isinstance(report.results[EstimatorKind.POLICY_ENTROPY].outcome, Success)
    assert isinstance(
        default_estimators()[EstimatorKind.POLICY_ENTROPY], PolicyEntropyEstimator
    )
