"""XML codec for the SIF 3 infrastructure payloads used by Functional Services.

Documents are written in the infrastructure namespace. Reading ignores
namespaces entirely, so providers that omit or prefix them still parse.
"""

import re
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Iterator, List, Optional, Type, TypeVar

from ..errors import MarshallingError
from ..model.environment import Environment, RightType, RightValue, Service, ServiceType, Zone
from ..model.job import Job, JobState, Phase, PhaseState, StateRecord
from ..model.responses import (
    CreateStatus,
    DeleteStatus,
    MultipleCreateResponse,
    MultipleDeleteResponse,
    ResponseError,
)
from .interfaces import Marshaller

INFRASTRUCTURE_NAMESPACE = "http://www.sifassociation.org/infrastructure/3.2.1"

# .NET providers write up to seven fractional digits.
_FRACTION = re.compile(r"\.(\d+)")

E = TypeVar("E", bound=Enum)
T = TypeVar("T")


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _children(element: Optional[ET.Element], name: str) -> Iterator[ET.Element]:
    if element is None:
        return iter(())
    return (child for child in element if _local(child.tag) == name)


def _child(element: Optional[ET.Element], name: str) -> Optional[ET.Element]:
    return next(_children(element, name), None)


def _text(element: Optional[ET.Element], name: str) -> Optional[str]:
    child = _child(element, name)
    if child is None or child.text is None:
        return None
    value = child.text.strip()
    return value or None


def _enum(enum_type: Type[E], value: Optional[str]) -> Optional[E]:
    if value is None:
        return None
    try:
        return enum_type(value.strip())
    except ValueError as exc:
        raise MarshallingError(f"Unknown {enum_type.__name__} value: {value}") from exc


def _format_datetime(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat()


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    try:
        normalised = _FRACTION.sub(lambda match: "." + match.group(1)[:6].ljust(6, "0"), value, count=1)
        parsed = datetime.fromisoformat(normalised.replace("Z", "+00:00"))
    except ValueError as exc:
        raise MarshallingError(f"Invalid timestamp: {value}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _bool(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in ("true", "1")


class XmlMarshaller(Marshaller):
    def __init__(self, namespace: str = INFRASTRUCTURE_NAMESPACE) -> None:
        self._namespace = namespace

    # Jobs

    def serialise_job(self, job: Job) -> str:
        return self._dump(self._job_element(job))

    def deserialise_job(self, payload: str) -> Job:
        return self._read(payload, "job", self._job_from_element)

    def serialise_jobs(self, jobs: List[Job]) -> str:
        root = self._element("jobs")
        for job in jobs:
            root.append(self._job_element(job))
        return self._dump(root)

    def deserialise_jobs(self, payload: str) -> List[Job]:
        return self._read(
            payload, "jobs", lambda root: [self._job_from_element(item) for item in _children(root, "job")]
        )

    # Create responses

    def serialise_create_response(self, response: MultipleCreateResponse) -> str:
        root = self._element("createResponse")
        creates = self._sub(root, "creates")
        for record in response.status_records:
            create = self._sub(creates, "create")
            if record.id is not None:
                create.set("id", record.id)
            if record.advisory_id is not None:
                create.set("advisoryId", record.advisory_id)
            create.set("statusCode", str(record.status_code))
            self._error_element(create, record.error)
        return self._dump(root)

    def deserialise_create_response(self, payload: str) -> MultipleCreateResponse:
        def build(root: ET.Element) -> MultipleCreateResponse:
            records = [
                CreateStatus(
                    id=create.get("id"),
                    status_code=self._status_code(create),
                    advisory_id=create.get("advisoryId"),
                    error=self._error_from_element(_child(create, "error")),
                )
                for create in _children(_child(root, "creates"), "create")
            ]
            return MultipleCreateResponse(status_records=records)

        return self._read(payload, "createResponse", build)

    # Delete requests and responses

    def serialise_delete_request(self, ids: List[str]) -> str:
        root = self._element("deleteRequest")
        deletes = self._sub(root, "deletes")
        for identifier in ids:
            self._sub(deletes, "delete").set("id", str(identifier))
        return self._dump(root)

    def deserialise_delete_request(self, payload: str) -> List[str]:
        return self._read(
            payload,
            "deleteRequest",
            lambda root: [item.get("id", "") for item in _children(_child(root, "deletes"), "delete")],
        )

    def serialise_delete_response(self, response: MultipleDeleteResponse) -> str:
        root = self._element("deleteResponse")
        deletes = self._sub(root, "deletes")
        for record in response.status_records:
            delete = self._sub(deletes, "delete")
            delete.set("id", record.id)
            delete.set("statusCode", str(record.status_code))
            self._error_element(delete, record.error)
        return self._dump(root)

    def deserialise_delete_response(self, payload: str) -> MultipleDeleteResponse:
        def build(root: ET.Element) -> MultipleDeleteResponse:
            records = [
                DeleteStatus(
                    id=delete.get("id", ""),
                    status_code=self._status_code(delete),
                    error=self._error_from_element(_child(delete, "error")),
                )
                for delete in _children(_child(root, "deletes"), "delete")
            ]
            return MultipleDeleteResponse(status_records=records)

        return self._read(payload, "deleteResponse", build)

    # Environments

    def serialise_environment(self, environment: Environment) -> str:
        root = self._element("environment")
        if environment.id:
            root.set("id", environment.id)
        root.set("type", environment.type)
        self._text_element(root, "sessionToken", environment.session_token)
        self._text_element(root, "solutionId", environment.solution_id)
        if environment.default_zone_id:
            self._sub(root, "defaultZone").set("id", environment.default_zone_id)
        self._text_element(root, "authenticationMethod", environment.authentication_method)
        self._text_element(root, "instanceId", environment.instance_id)
        self._text_element(root, "userToken", environment.user_token)
        self._text_element(root, "consumerName", environment.consumer_name)
        info = self._sub(root, "applicationInfo")
        self._text_element(info, "applicationKey", environment.application_key)
        self._text_element(info, "supportedInfrastructureVersion", environment.infrastructure_version)
        self._text_element(info, "dataModelNamespace", environment.data_model_namespace)
        if environment.infrastructure_services:
            services = self._sub(root, "infrastructureServices")
            for name, url in environment.infrastructure_services.items():
                service = self._sub(services, "infrastructureService")
                service.set("name", name)
                service.text = url
        if environment.provisioned_zones:
            zones = self._sub(root, "provisionedZones")
            for zone in environment.provisioned_zones.values():
                self._zone_element(zones, zone)
        return self._dump(root)

    def deserialise_environment(self, payload: str) -> Environment:
        def build(root: ET.Element) -> Environment:
            info = _child(root, "applicationInfo")
            default_zone = _child(root, "defaultZone")
            infrastructure_services = {
                service.get("name", ""): (service.text or "").strip()
                for service in _children(_child(root, "infrastructureServices"), "infrastructureService")
            }
            zones = [
                self._zone_from_element(item)
                for item in _children(_child(root, "provisionedZones"), "provisionedZone")
            ]
            return Environment(
                application_key=_text(info, "applicationKey"),
                instance_id=_text(root, "instanceId"),
                user_token=_text(root, "userToken"),
                solution_id=_text(root, "solutionId"),
                id=root.get("id"),
                type=root.get("type", "DIRECT"),
                session_token=_text(root, "sessionToken"),
                consumer_name=_text(root, "consumerName"),
                authentication_method=_text(root, "authenticationMethod"),
                infrastructure_version=_text(info, "supportedInfrastructureVersion"),
                data_model_namespace=_text(info, "dataModelNamespace"),
                default_zone_id=None if default_zone is None else default_zone.get("id"),
                infrastructure_services=infrastructure_services,
                provisioned_zones={zone.id: zone for zone in zones},
            )

        return self._read(payload, "environment", build)

    # Helpers

    def _element(self, name: str) -> ET.Element:
        return ET.Element(f"{{{self._namespace}}}{name}")

    def _sub(self, parent: ET.Element, name: str) -> ET.Element:
        return ET.SubElement(parent, f"{{{self._namespace}}}{name}")

    def _text_element(self, parent: ET.Element, name: str, value: Optional[str]) -> None:
        if value is not None:
            self._sub(parent, name).text = value

    def _dump(self, root: ET.Element) -> str:
        return ET.tostring(root, encoding="unicode", default_namespace=self._namespace)

    def _read(self, payload: str, root_name: str, build: Callable[[ET.Element], T]) -> T:
        try:
            root = ET.fromstring(payload)
        except ET.ParseError as exc:
            raise MarshallingError(f"Malformed {root_name} document: {exc}") from exc
        if _local(root.tag) != root_name:
            raise MarshallingError(f"Expected a {root_name} document but found {_local(root.tag)}")
        try:
            return build(root)
        except MarshallingError:
            raise
        except ValueError as exc:
            raise MarshallingError(f"Invalid {root_name} document: {exc}") from exc

    def _status_code(self, element: ET.Element) -> int:
        value = element.get("statusCode")
        if value is None:
            raise MarshallingError(f"{_local(element.tag)} is missing a statusCode")
        return int(value)

    def _job_element(self, job: Job) -> ET.Element:
        root = self._element("job")
        if job.id is not None:
            root.set("id", str(job.id))
        self._text_element(root, "name", job.name)
        self._text_element(root, "description", job.description)
        self._text_element(root, "state", None if job.state is None else job.state.value)
        self._text_element(root, "stateDescription", job.state_description)
        self._text_element(root, "created", _format_datetime(job.created))
        self._text_element(root, "lastModified", _format_datetime(job.last_modified))
        self._text_element(root, "timeout", job.timeout)
        if job.phases:
            phases = self._sub(root, "phases")
            for phase in job.phases.values():
                self._phase_element(phases, phase)
        return root

    def _phase_element(self, parent: ET.Element, phase: Phase) -> None:
        element = self._sub(parent, "phase")
        self._text_element(element, "name", phase.name)
        states = self._sub(element, "states")
        for record in phase.states:
            state = self._sub(states, "state")
            self._text_element(state, "type", record.type.value)
            self._text_element(state, "created", _format_datetime(record.created))
            self._text_element(state, "lastModified", _format_datetime(record.last_modified))
            self._text_element(state, "description", record.description)
        self._text_element(element, "required", "true" if phase.required else "false")

    def _job_from_element(self, root: ET.Element) -> Job:
        name = _text(root, "name")
        if name is None:
            raise MarshallingError("job is missing a name")
        phases = [self._phase_from_element(item) for item in _children(_child(root, "phases"), "phase")]
        return Job.restore(
            name=name,
            id=root.get("id"),
            description=_text(root, "description"),
            state=_enum(JobState, _text(root, "state")),
            state_description=_text(root, "stateDescription"),
            created=_parse_datetime(_text(root, "created")),
            last_modified=_parse_datetime(_text(root, "lastModified")),
            timeout=_text(root, "timeout"),
            phases=phases,
        )

    def _phase_from_element(self, element: ET.Element) -> Phase:
        name = _text(element, "name")
        if name is None:
            raise MarshallingError("phase is missing a name")
        states = []
        for item in _children(_child(element, "states"), "state"):
            state_type = _enum(PhaseState, _text(item, "type"))
            if state_type is None:
                raise MarshallingError(f"phase {name} has a state without a type")
            created = _parse_datetime(_text(item, "created"))
            last_modified = _parse_datetime(_text(item, "lastModified")) or created
            states.append(
                StateRecord(
                    type=state_type,
                    description=_text(item, "description"),
                    created=created or last_modified,
                    last_modified=last_modified,
                )
            )
        return Phase.restore(name, _bool(_text(element, "required"), True), states)

    def _error_element(self, parent: ET.Element, error: Optional[ResponseError]) -> None:
        if error is None:
            return
        element = self._sub(parent, "error")
        if error.id is not None:
            element.set("id", error.id)
        self._text_element(element, "code", str(error.code))
        self._text_element(element, "scope", error.scope)
        self._text_element(element, "message", error.message)
        self._text_element(element, "description", error.description)

    def _error_from_element(self, element: Optional[ET.Element]) -> Optional[ResponseError]:
        if element is None:
            return None
        code = _text(element, "code")
        return ResponseError(
            id=element.get("id"),
            code=int(code) if code is not None else 0,
            scope=_text(element, "scope"),
            message=_text(element, "message"),
            description=_text(element, "description"),
        )

    def _zone_element(self, parent: ET.Element, zone: Zone) -> None:
        element = self._sub(parent, "provisionedZone")
        element.set("id", zone.id)
        self._text_element(element, "description", zone.description)
        services = self._sub(element, "services")
        for service in zone.services:
            item = self._sub(services, "service")
            item.set("name", service.name)
            item.set("type", service.type.value)
            item.set("contextId", service.context_id)
            rights = self._sub(item, "rights")
            for right_type, right_value in service.rights.items():
                right = self._sub(rights, "right")
                right.set("type", right_type.value)
                right.text = right_value.value

    def _zone_from_element(self, element: ET.Element) -> Zone:
        services = []
        for item in _children(_child(element, "services"), "service"):
            rights = {}
            for right in _children(_child(item, "rights"), "right"):
                right_type = _enum(RightType, right.get("type"))
                right_value = _enum(RightValue, right.text)
                if right_type is not None and right_value is not None:
                    rights[right_type] = right_value
            services.append(
                Service(
                    name=item.get("name", ""),
                    type=_enum(ServiceType, item.get("type")) or ServiceType.OBJECT,
                    context_id=item.get("contextId", "DEFAULT"),
                    rights=rights,
                )
            )
        return Zone(id=element.get("id", ""), description=_text(element, "description"), services=services)
