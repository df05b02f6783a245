import pytest

from sif_functional.errors import (
    AuthorizationError,
    JobValidationError,
    NotRegisteredError,
    UnsupportedOperationError,
)
from sif_functional.model.environment import RightType
from sif_functional.model.job import Job


def _job(name: str = "grading", id: str = "abc-123") -> Job:
    job = Job(name)
    job.id = id
    return job


def test_operations_require_registration(unregistered_consumer, transport):
    with pytest.raises(NotRegisteredError):
        unregistered_consumer.create(Job("grading"))
    with pytest.raises(NotRegisteredError):
        unregistered_consumer.query_all("grading")
    with pytest.raises(NotRegisteredError):
        unregistered_consumer.create_to_phase(_job(), "marks")
    assert transport.calls == []


def test_unregister_clears_environment(consumer, registration):
    assert consumer.environment is not None
    consumer.unregister(delete_on_unregister=True)
    assert consumer.environment is None
    assert registration.unregister_calls == [True]
    with pytest.raises(NotRegisteredError):
        consumer.query(_job())


def test_environment_template_is_merged_with_settings(unregistered_consumer):
    template = unregistered_consumer.environment_template
    assert template.application_key == "gradebook"
    assert template.authentication_method == "Basic"


def test_validate_resource_rejects_none(consumer):
    with pytest.raises(JobValidationError):
        consumer.validate_resource(None)


def test_validate_resource_rejects_unknown_service(consumer):
    with pytest.raises(JobValidationError):
        consumer.validate_resource(Job("timetable"))


def test_validate_resource_rejects_service_outside_zone(consumer):
    with pytest.raises(JobValidationError):
        consumer.validate_resource(Job("grading"), zone="DistrictZone")
    assert consumer.validate_resource(Job("report"), zone="DistrictZone").name == "reports"


def test_validate_resource_ignores_object_services(consumer):
    with pytest.raises(JobValidationError):
        consumer.validate_resource(Job("student"))


def test_authorize_operation_requires_id_except_for_create(consumer):
    consumer.authorize_operation(Job("grading"), RightType.CREATE)
    for right in (RightType.QUERY, RightType.UPDATE, RightType.DELETE):
        with pytest.raises(JobValidationError):
            consumer.authorize_operation(Job("grading"), right)


def test_authorize_operation_can_ignore_id(consumer):
    service = consumer.authorize_operation(Job("grading"), RightType.QUERY, ignore_id=True)
    assert service.name == "gradings"


def test_authorize_operation_rejects_rejected_right(consumer):
    with pytest.raises(AuthorizationError):
        consumer.authorize_operation(_job("audit"), RightType.DELETE)


def test_authorize_operation_rejects_absent_right(consumer):
    with pytest.raises(AuthorizationError):
        consumer.authorize_operation(_job("audit"), RightType.UPDATE)


def test_authorize_batch_rejects_empty_lists(consumer):
    with pytest.raises(JobValidationError):
        consumer.authorize_batch([], RightType.CREATE)
    with pytest.raises(JobValidationError):
        consumer.authorize_batch(None, RightType.CREATE)


def test_authorize_batch_rejects_mixed_names(consumer):
    with pytest.raises(JobValidationError):
        consumer.authorize_batch([Job("grading"), Job("audit")], RightType.CREATE)


def test_authorize_batch_returns_shared_name(consumer):
    assert consumer.authorize_batch([Job("grading"), Job("grading")], RightType.CREATE) == "grading"


@pytest.mark.parametrize(
    "call",
    [
        lambda c: c.create(None),
        lambda c: c.create(Job("timetable")),
        lambda c: c.query(Job("grading")),
        lambda c: c.query(_job("audit")),
        lambda c: c.delete(_job("audit")),
        lambda c: c.query_all("timetable"),
        lambda c: c.query_by_example(Job("grading")),
        lambda c: c.create_many([Job("grading"), Job("audit")]),
        lambda c: c.delete_many([_job(), _job("audit")]),
        lambda c: c.retrieve_to_phase(Job("timetable"), "marks"),
    ],
)
def test_failed_checks_never_reach_the_transport(consumer, transport, call):
    with pytest.raises((JobValidationError, AuthorizationError)):
        call(consumer)
    assert transport.calls == []


def test_update_is_always_unsupported(consumer, transport):
    with pytest.raises(UnsupportedOperationError) as excinfo:
        consumer.update(_job())
    assert excinfo.value.status_code == 403
    with pytest.raises(UnsupportedOperationError):
        consumer.update_many([_job(), _job(id="def-456")])
    assert transport.calls == []


def test_update_without_id_is_unsupported(consumer, transport):
    with pytest.raises(UnsupportedOperationError):
        consumer.update(Job("grading"))
    assert transport.calls == []


def test_update_checks_before_refusing(consumer, transport):
    with pytest.raises(AuthorizationError):
        consumer.update(_job("audit"))
    with pytest.raises(JobValidationError):
        consumer.update(Job("timetable"))
    with pytest.raises(JobValidationError):
        consumer.update_many([_job(), Job("timetable")])
    assert transport.calls == []
