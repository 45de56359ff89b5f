"""Tests for the job state model."""

import pytest
from pydantic import ValidationError

from retouch.errors import InvalidTransition
from retouch.jobs import Job, JobKind, JobPayload, JobSnapshot, JobStatus


@pytest.mark.parametrize(
    "status,terminal",
    [
        (JobStatus.PENDING, False),
        (JobStatus.PROCESSING, False),
        (JobStatus.SUCCEEDED, True),
        (JobStatus.FAILED, True),
        (JobStatus.CANCELLED, True),
        (JobStatus.TIMED_OUT, True),
    ],
)
def test_terminal_statuses(status, terminal):
    assert status.is_terminal is terminal


@pytest.mark.parametrize(
    "provider_status,expected",
    [
        ("starting", JobStatus.PENDING),
        ("processing", JobStatus.PROCESSING),
        ("succeeded", JobStatus.SUCCEEDED),
        ("failed", JobStatus.FAILED),
        ("canceled", JobStatus.CANCELLED),
        ("something-new", JobStatus.PROCESSING),
        (None, JobStatus.PROCESSING),
    ],
)
def test_from_provider(provider_status, expected):
    assert JobStatus.from_provider(provider_status) == expected


class TestJobTransitions:

    def test_success_records_result_only(self):
        job = Job(id="j1", kind=JobKind.ASYNCHRONOUS)
        job.transition(JobStatus.PROCESSING)
        job.transition(JobStatus.SUCCEEDED, result=["a.png"], error="ignored")
        assert job.result == ["a.png"]
        assert job.error is None

    def test_timeout_records_error(self):
        job = Job(id="j1", kind=JobKind.ASYNCHRONOUS)
        job.transition(JobStatus.TIMED_OUT, error="Timed out")
        assert job.error == "Timed out"
        assert job.result is None

    def test_terminal_state_is_final(self):
        job = Job(id="j1", kind=JobKind.SYNCHRONOUS)
        job.transition(JobStatus.CANCELLED)
        with pytest.raises(InvalidTransition):
            job.transition(JobStatus.SUCCEEDED, result=b"png")
        assert job.status == JobStatus.CANCELLED


def test_payload_is_read_only():
    payload = JobPayload(image=b"img", mask=b"mask", prompt="sky", output_count=2)
    with pytest.raises(ValidationError):
        payload.prompt = "sea"


def test_payload_rejects_zero_outputs():
    with pytest.raises(ValidationError):
        JobPayload(image=b"img", mask=b"mask", output_count=0)


def test_snapshot_has_output():
    assert not JobSnapshot(id="j", status=JobStatus.PROCESSING).has_output
    assert not JobSnapshot(id="j", status=JobStatus.SUCCEEDED, output=[]).has_output
    assert JobSnapshot(id="j", status=JobStatus.SUCCEEDED, output=["x"]).has_output
