from typing import List, Optional

from ..config.settings import ConsumerSettings
from ..errors import (
    AuthorizationError,
    HttpStatusError,
    JobValidationError,
    NotRegisteredError,
    UnsupportedOperationError,
)
from ..model.environment import (
    Environment,
    RightType,
    RightValue,
    Service,
    ServiceType,
    find_service,
    matrix_parameters,
    merge_with_settings,
    parse_service_url,
    target_zone,
)
from ..model.job import Job
from ..model.responses import MultipleCreateResponse, MultipleDeleteResponse, MultipleUpdateResponse
from ..registration.interfaces import RegistrationService
from ..registration.service import EnvironmentRegistrationService
from ..serialisation.interfaces import Marshaller
from ..serialisation.xml import XmlMarshaller
from ..shared.logging import get_logger, log_event
from ..transport.http import RequestsTransport
from ..transport.interfaces import Transport

logger = get_logger("consumer")


class FunctionalServiceConsumer:
    """Client for the Jobs and Phases of SIF Functional Services.

    Every operation checks registration and validates the Job against the
    rights of the target zone before any request is sent. Jobs returned by
    an operation are new instances built from the response.
    """

    def __init__(
        self,
        environment: Environment,
        settings: Optional[ConsumerSettings] = None,
        registration: Optional[RegistrationService] = None,
        transport: Optional[Transport] = None,
        marshaller: Optional[Marshaller] = None,
    ) -> None:
        self._settings = settings or ConsumerSettings.from_env()
        self._environment_template = merge_with_settings(environment, self._settings)
        self._transport = transport or RequestsTransport(timeout=self._settings.request_timeout_seconds)
        self._marshaller = marshaller or XmlMarshaller()
        self._registration = registration or EnvironmentRegistrationService(
            self._settings, self._transport, self._marshaller
        )
        self._environment: Optional[Environment] = None

    @classmethod
    def for_application(
        cls,
        application_key: str,
        instance_id: Optional[str] = None,
        user_token: Optional[str] = None,
        solution_id: Optional[str] = None,
        **kwargs,
    ) -> "FunctionalServiceConsumer":
        environment = Environment(
            application_key=application_key,
            instance_id=instance_id,
            user_token=user_token,
            solution_id=solution_id,
        )
        return cls(environment, **kwargs)

    @property
    def environment_template(self) -> Environment:
        return self._environment_template

    @property
    def environment(self) -> Optional[Environment]:
        return self._environment

    @property
    def registration(self) -> RegistrationService:
        return self._registration

    def register(self) -> None:
        self._environment = self._registration.register(self._environment_template)
        log_event(logger, "consumer.registered", environment_id=self._environment.id)

    def unregister(self, delete_on_unregister: Optional[bool] = None) -> None:
        self._registration.unregister(delete_on_unregister)
        self._environment = None
        log_event(logger, "consumer.unregistered")

    # Jobs

    def create(self, job: Job, zone: Optional[str] = None, context: Optional[str] = None) -> Job:
        """POST ``job`` to the single-object path ``{name}s/{name}``; batches go to ``{name}s``."""
        self._check_registered()
        self.authorize_operation(job, RightType.CREATE, zone)

        url = self._url(job.name, job.name, zone, context)
        body = self._marshaller.serialise_job(job)
        log_event(logger, "job.create", url=url)
        xml = self._transport.post(url, self._token, body)
        logger.debug("XML from POST request: %s", xml)
        return self._marshaller.deserialise_job(xml)

    def create_many(
        self, jobs: List[Job], zone: Optional[str] = None, context: Optional[str] = None
    ) -> MultipleCreateResponse:
        self._check_registered()
        job_name = self.authorize_batch(jobs, RightType.CREATE, zone)

        url = self._url(job_name, None, zone, context)
        body = self._marshaller.serialise_jobs(jobs)
        log_event(logger, "job.create_many", url=url, count=len(jobs))
        xml = self._transport.post(url, self._token, body)
        logger.debug("XML from POST request: %s", xml)
        return self._marshaller.deserialise_create_response(xml)

    def query(self, job: Job, zone: Optional[str] = None, context: Optional[str] = None) -> Optional[Job]:
        """Fetch the current remote copy of ``job``, or ``None`` if the service has no such Job."""
        self._check_registered()
        self.authorize_operation(job, RightType.QUERY, zone)

        url = self._url(job.name, job.id, zone, context)
        log_event(logger, "job.query", url=url)
        try:
            xml = self._transport.get(url, self._token)
        except HttpStatusError as exc:
            if exc.is_not_found:
                log_event(logger, "job.not_found", url=url)
                return None
            raise
        logger.debug("XML from GET request: %s", xml)
        return self._marshaller.deserialise_job(xml)

    def query_all(
        self,
        service_name: str,
        navigation_page: Optional[int] = None,
        navigation_page_size: Optional[int] = None,
        zone: Optional[str] = None,
        context: Optional[str] = None,
    ) -> List[Job]:
        self._check_registered()
        self.authorize_operation(Job(service_name), RightType.QUERY, zone, ignore_id=True)

        url = self._url(service_name, None, zone, context)
        log_event(logger, "job.query_all", url=url, page=navigation_page, page_size=navigation_page_size)
        if navigation_page is not None and navigation_page_size is not None:
            xml = self._transport.get(url, self._token, navigation_page, navigation_page_size)
        else:
            xml = self._transport.get(url, self._token)
        logger.debug("XML from GET request: %s", xml)
        return self._marshaller.deserialise_jobs(xml)

    def query_by_example(
        self, job: Job, zone: Optional[str] = None, context: Optional[str] = None
    ) -> List[Job]:
        self._check_registered()
        self.authorize_operation(job, RightType.QUERY, zone)

        url = self._url(job.name, None, zone, context)
        body = self._marshaller.serialise_job(job)
        log_event(logger, "job.query_by_example", url=url)
        xml = self._transport.post(url, self._token, body, method_override="GET")
        logger.debug("XML from POST (query by example) request: %s", xml)
        return self._marshaller.deserialise_jobs(xml)

    def update(self, job: Job, zone: Optional[str] = None, context: Optional[str] = None) -> None:
        """Functional Service Jobs cannot be updated; always raises after the usual checks."""
        self._check_registered()
        self.authorize_operation(job, RightType.UPDATE, zone, ignore_id=True)
        raise UnsupportedOperationError("Jobs of a Functional Service cannot be updated")

    def update_many(
        self, jobs: List[Job], zone: Optional[str] = None, context: Optional[str] = None
    ) -> MultipleUpdateResponse:
        self._check_registered()
        self.authorize_batch(jobs, RightType.UPDATE, zone, ignore_id=True)
        raise UnsupportedOperationError("Jobs of a Functional Service cannot be updated")

    def delete(self, job: Job, zone: Optional[str] = None, context: Optional[str] = None) -> None:
        self._check_registered()
        self.authorize_operation(job, RightType.DELETE, zone)

        url = self._url(job.name, job.id, zone, context)
        log_event(logger, "job.delete", url=url)
        xml = self._transport.delete(url, self._token)
        logger.debug("XML from DELETE request: %s", xml)

    def delete_many(
        self, jobs: List[Job], zone: Optional[str] = None, context: Optional[str] = None
    ) -> MultipleDeleteResponse:
        self._check_registered()
        job_name = self.authorize_batch(jobs, RightType.DELETE, zone)

        url = self._url(job_name, None, zone, context)
        body = self._marshaller.serialise_delete_request([str(job.id) for job in jobs])
        log_event(logger, "job.delete_many", url=url, count=len(jobs))
        xml = self._transport.put(url, self._token, body, method_override="DELETE")
        logger.debug("XML from PUT (DELETE) request: %s", xml)
        return self._marshaller.deserialise_delete_response(xml)

    # Phases

    def create_to_phase(
        self,
        job: Job,
        phase_name: str,
        body: Optional[str] = None,
        zone: Optional[str] = None,
        context: Optional[str] = None,
        content_type: Optional[str] = None,
        accept: Optional[str] = None,
    ) -> str:
        self._check_registered()
        self.validate_resource(job, zone)

        url = self._phase_url(job, phase_name, zone, context)
        log_event(logger, "phase.create", url=url)
        response = self._transport.post(url, self._token, body, content_type=content_type, accept=accept)
        logger.debug("String from CREATE request to phase: %s", response)
        return response

    def retrieve_to_phase(
        self,
        job: Job,
        phase_name: str,
        body: Optional[str] = None,
        zone: Optional[str] = None,
        context: Optional[str] = None,
        content_type: Optional[str] = None,
        accept: Optional[str] = None,
    ) -> str:
        self._check_registered()
        self.validate_resource(job, zone)

        url = self._phase_url(job, phase_name, zone, context)
        log_event(logger, "phase.retrieve", url=url)
        response = self._transport.post(
            url, self._token, body, method_override="GET", content_type=content_type, accept=accept
        )
        logger.debug("String from GET request to phase: %s", response)
        return response

    def update_to_phase(
        self,
        job: Job,
        phase_name: str,
        body: Optional[str] = None,
        zone: Optional[str] = None,
        context: Optional[str] = None,
        content_type: Optional[str] = None,
        accept: Optional[str] = None,
    ) -> str:
        self._check_registered()
        self.validate_resource(job, zone)

        url = self._phase_url(job, phase_name, zone, context)
        log_event(logger, "phase.update", url=url)
        response = self._transport.put(url, self._token, body, content_type=content_type, accept=accept)
        logger.debug("String from PUT request to phase: %s", response)
        return response

    def delete_to_phase(
        self,
        job: Job,
        phase_name: str,
        body: Optional[str] = None,
        zone: Optional[str] = None,
        context: Optional[str] = None,
        content_type: Optional[str] = None,
        accept: Optional[str] = None,
    ) -> str:
        self._check_registered()
        self.validate_resource(job, zone)

        url = self._phase_url(job, phase_name, zone, context)
        log_event(logger, "phase.delete", url=url)
        response = self._transport.delete(url, self._token, body, content_type=content_type, accept=accept)
        logger.debug("String from DELETE request to phase: %s", response)
        return response

    # Checks

    def validate_resource(self, job: Optional[Job], zone: Optional[str] = None) -> Service:
        if job is None:
            raise JobValidationError("Job cannot be None")
        if not job.name:
            raise JobValidationError("Job name must be specified")

        resource = f"{job.name}s"
        service = find_service(target_zone(self._environment, zone), resource, ServiceType.FUNCTIONAL)
        if service is None:
            raise JobValidationError(
                f"A FUNCTIONAL service with the name {resource} cannot be found in the current environment"
            )
        return service

    def authorize_operation(
        self, job: Optional[Job], right: RightType, zone: Optional[str] = None, ignore_id: bool = False
    ) -> Service:
        service = self.validate_resource(job, zone)

        if not ignore_id and right != RightType.CREATE and job.id is None:
            raise JobValidationError("Job must have an Id for any non-creation operation")

        granted = service.rights.get(right)
        if granted is None:
            raise AuthorizationError(f"The {right.value} right is not granted to {service.name}")
        if granted == RightValue.REJECTED:
            raise AuthorizationError("The attempted operation is not permitted in the ACL of the current environment")
        return service

    def authorize_batch(
        self, jobs: Optional[List[Job]], right: RightType, zone: Optional[str] = None, ignore_id: bool = False
    ) -> str:
        """Authorize every Job of a batch and return the name they share."""
        if not jobs:
            raise JobValidationError("List of job objects cannot be None or empty")

        name = None
        for job in jobs:
            self.authorize_operation(job, right, zone, ignore_id)
            if name is None:
                name = job.name
            if name != job.name:
                raise JobValidationError("All job objects must have the same name")
        return name

    def _check_registered(self) -> None:
        if not self._registration.registered:
            raise NotRegisteredError("Consumer has not registered")

    @property
    def _token(self) -> Optional[str]:
        return self._registration.authorisation_token

    def _url(self, name: str, segment: Optional[str], zone: Optional[str], context: Optional[str]) -> str:
        url = f"{parse_service_url(self._environment, ServiceType.FUNCTIONAL)}/{name}s"
        if segment is not None:
            url += f"/{segment}"
        return url + matrix_parameters(zone, context)

    def _phase_url(self, job: Job, phase_name: str, zone: Optional[str], context: Optional[str]) -> str:
        if job.id is None:
            raise JobValidationError("Job must have an Id to address its phases")
        base = parse_service_url(self._environment, ServiceType.FUNCTIONAL)
        return f"{base}/{job.name}s/{job.id}/phases/{phase_name}" + matrix_parameters(zone, context)
