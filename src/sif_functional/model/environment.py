from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Optional

from ..errors import RegistrationError

if TYPE_CHECKING:
    from ..config.settings import ConsumerSettings


class RightType(str, Enum):
    CREATE = "CREATE"
    QUERY = "QUERY"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    PROVIDE = "PROVIDE"
    SUBSCRIBE = "SUBSCRIBE"
    ADMIN = "ADMIN"


class RightValue(str, Enum):
    APPROVED = "APPROVED"
    SUPPORTED = "SUPPORTED"
    REJECTED = "REJECTED"


class ServiceType(str, Enum):
    OBJECT = "OBJECT"
    FUNCTIONAL = "FUNCTIONAL"
    UTILITY = "UTILITY"
    SERVICEPATH = "SERVICEPATH"
    XQUERYTEMPLATE = "XQUERYTEMPLATE"


CONNECTOR_BY_SERVICE_TYPE: Dict[ServiceType, str] = {
    ServiceType.OBJECT: "requestsConnector",
    ServiceType.FUNCTIONAL: "servicesConnector",
    ServiceType.UTILITY: "requestsConnector",
    ServiceType.SERVICEPATH: "requestsConnector",
    ServiceType.XQUERYTEMPLATE: "requestsConnector",
}


@dataclass
class Service:
    name: str
    type: ServiceType
    context_id: str = "DEFAULT"
    rights: Dict[RightType, RightValue] = field(default_factory=dict)


@dataclass
class Zone:
    id: str
    description: Optional[str] = None
    services: List[Service] = field(default_factory=list)


@dataclass
class Environment:
    application_key: Optional[str] = None
    instance_id: Optional[str] = None
    user_token: Optional[str] = None
    solution_id: Optional[str] = None
    id: Optional[str] = None
    type: str = "DIRECT"
    session_token: Optional[str] = None
    consumer_name: Optional[str] = None
    authentication_method: Optional[str] = None
    infrastructure_version: Optional[str] = None
    data_model_namespace: Optional[str] = None
    default_zone_id: Optional[str] = None
    infrastructure_services: Dict[str, str] = field(default_factory=dict)
    provisioned_zones: Dict[str, Zone] = field(default_factory=dict)


def merge_with_settings(environment: Environment, settings: "ConsumerSettings") -> Environment:
    return replace(
        environment,
        application_key=environment.application_key or settings.application_key,
        instance_id=environment.instance_id or settings.instance_id,
        user_token=environment.user_token or settings.user_token,
        solution_id=environment.solution_id or settings.solution_id,
        type=environment.type or settings.environment_type,
        consumer_name=environment.consumer_name or settings.consumer_name,
        authentication_method=environment.authentication_method or settings.authentication_method,
        infrastructure_version=environment.infrastructure_version or settings.infrastructure_version,
        data_model_namespace=environment.data_model_namespace or settings.data_model_namespace,
    )


def parse_service_url(environment: Environment, service_type: ServiceType = ServiceType.OBJECT) -> str:
    connector = CONNECTOR_BY_SERVICE_TYPE[service_type]
    url = environment.infrastructure_services.get(connector)
    if not url:
        raise RegistrationError(f"Environment does not define the {connector} infrastructure service")
    return url.rstrip("/")


def target_zone(environment: Optional[Environment], zone_id: Optional[str] = None) -> Optional[Zone]:
    if environment is None:
        return None
    return environment.provisioned_zones.get(zone_id or environment.default_zone_id or "")


def find_service(zone: Optional[Zone], name: str, service_type: ServiceType) -> Optional[Service]:
    if zone is None:
        return None
    for service in zone.services:
        if service.name == name and service.type == service_type:
            return service
    return None


def matrix_parameters(zone_id: Optional[str] = None, context_id: Optional[str] = None) -> str:
    parameters = ""
    if zone_id and zone_id.strip():
        parameters += f";zoneId={zone_id.strip()}"
    if context_id and context_id.strip():
        parameters += f";contextId={context_id.strip()}"
    return parameters
