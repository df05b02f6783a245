import pytest

from sif_functional.errors import HttpStatusError, JobValidationError
from sif_functional.model.job import Job

PHASE_URL = "http://provider.test/api/services/audits/j9/phases/marks"


def _audit() -> Job:
    job = Job("audit")
    job.id = "j9"
    return job


def test_phase_operations_skip_the_rights_check(consumer, transport):
    # audits rejects QUERY and DELETE, but phases are not gated by rights.
    transport.responses = {"POST": "<ok/>", "PUT": "<ok/>", "DELETE": "<ok/>"}

    assert consumer.create_to_phase(_audit(), "marks", "<marks/>") == "<ok/>"
    assert consumer.retrieve_to_phase(_audit(), "marks") == "<ok/>"
    assert consumer.update_to_phase(_audit(), "marks", "<marks/>") == "<ok/>"
    assert consumer.delete_to_phase(_audit(), "marks", "<marks/>") == "<ok/>"

    assert [(call["method"], call.get("method_override")) for call in transport.calls] == [
        ("POST", None),
        ("POST", "GET"),
        ("PUT", None),
        ("DELETE", None),
    ]
    assert {call["url"] for call in transport.calls} == {PHASE_URL}


def test_phase_operations_forward_media_type_overrides(consumer, transport):
    transport.responses["POST"] = '{"status": "accepted"}'

    response = consumer.create_to_phase(
        _audit(),
        "marks",
        '{"marks": []}',
        zone="SchoolZone",
        context="CURRENT",
        content_type="application/json",
        accept="application/json",
    )

    call = transport.calls[0]
    assert call["url"] == f"{PHASE_URL};zoneId=SchoolZone;contextId=CURRENT"
    assert call["body"] == '{"marks": []}'
    assert call["content_type"] == "application/json"
    assert call["accept"] == "application/json"
    assert response == '{"status": "accepted"}'


def test_phase_operations_still_require_a_known_service(consumer, transport):
    job = Job("timetable")
    job.id = "t1"
    with pytest.raises(JobValidationError):
        consumer.update_to_phase(job, "marks", "<marks/>")
    with pytest.raises(JobValidationError):
        consumer.delete_to_phase(None, "marks", "<marks/>")
    assert transport.calls == []


def test_phase_not_found_propagates(consumer, transport):
    transport.responses["POST"] = HttpStatusError(404, PHASE_URL)
    with pytest.raises(HttpStatusError):
        consumer.retrieve_to_phase(_audit(), "marks")


def test_phase_operations_require_a_job_id(consumer, transport):
    with pytest.raises(JobValidationError):
        consumer.create_to_phase(Job("audit"), "marks", "<marks/>")
    assert transport.calls == []
