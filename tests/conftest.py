from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from sif_functional.config.settings import ConsumerSettings  # noqa: E402
from sif_functional.consumer.functional_service import FunctionalServiceConsumer  # noqa: E402
from sif_functional.model.environment import (  # noqa: E402
    Environment,
    RightType,
    RightValue,
    Service,
    ServiceType,
    Zone,
)
from sif_functional.serialisation.xml import XmlMarshaller  # noqa: E402

SERVICES_URL = "http://provider.test/api/services"


class RecordingTransport:
    def __init__(self) -> None:
        self.calls: List[Dict[str, Any]] = []
        self.responses: Dict[str, Any] = {}

    def _record(self, method: str, url: str, token: str, **kwargs: Any) -> str:
        self.calls.append({"method": method, "url": url, "token": token, **kwargs})
        response = self.responses.get(method, "")
        if isinstance(response, Exception):
            raise response
        return response

    def get(self, url, token, navigation_page=None, navigation_page_size=None):
        return self._record(
            "GET", url, token, navigation_page=navigation_page, navigation_page_size=navigation_page_size
        )

    def post(self, url, token, body=None, method_override=None, content_type=None, accept=None):
        return self._record(
            "POST",
            url,
            token,
            body=body,
            method_override=method_override,
            content_type=content_type,
            accept=accept,
        )

    def put(self, url, token, body=None, method_override=None, content_type=None, accept=None):
        return self._record(
            "PUT",
            url,
            token,
            body=body,
            method_override=method_override,
            content_type=content_type,
            accept=accept,
        )

    def delete(self, url, token, body=None, content_type=None, accept=None):
        return self._record("DELETE", url, token, body=body, content_type=content_type, accept=accept)


class StubRegistration:
    def __init__(self, environment: Environment, token: str = "Basic dG9rZW4=") -> None:
        self._environment = environment
        self._token = token
        self.registered = False
        self.unregister_calls: List[Optional[bool]] = []

    @property
    def authorisation_token(self) -> Optional[str]:
        return self._token if self.registered else None

    def register(self, template: Environment) -> Environment:
        self.registered = True
        return self._environment

    def unregister(self, delete_on_unregister: Optional[bool] = None) -> None:
        self.unregister_calls.append(delete_on_unregister)
        self.registered = False


def _rights(**values: RightValue) -> Dict[RightType, RightValue]:
    return {RightType[name]: value for name, value in values.items()}


@pytest.fixture()
def environment() -> Environment:
    approved = RightValue.APPROVED
    school = Zone(
        id="SchoolZone",
        services=[
            Service(
                name="gradings",
                type=ServiceType.FUNCTIONAL,
                rights=_rights(CREATE=approved, QUERY=approved, UPDATE=approved, DELETE=approved),
            ),
            Service(
                name="audits",
                type=ServiceType.FUNCTIONAL,
                rights=_rights(CREATE=approved, QUERY=RightValue.REJECTED, DELETE=RightValue.REJECTED),
            ),
            Service(name="students", type=ServiceType.OBJECT, rights=_rights(QUERY=approved)),
        ],
    )
    district = Zone(
        id="DistrictZone",
        services=[
            Service(name="reports", type=ServiceType.FUNCTIONAL, rights=_rights(QUERY=approved)),
        ],
    )
    return Environment(
        application_key="gradebook",
        id="env-1",
        session_token="session-1",
        default_zone_id="SchoolZone",
        infrastructure_services={
            "environment": "http://provider.test/api/environments/env-1",
            "requestsConnector": "http://provider.test/api/requests",
            "servicesConnector": SERVICES_URL,
        },
        provisioned_zones={school.id: school, district.id: district},
    )


@pytest.fixture()
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture()
def registration(environment: Environment) -> StubRegistration:
    return StubRegistration(environment)


@pytest.fixture()
def marshaller() -> XmlMarshaller:
    return XmlMarshaller()


@pytest.fixture()
def unregistered_consumer(registration, transport, marshaller) -> FunctionalServiceConsumer:
    return FunctionalServiceConsumer(
        Environment(application_key="gradebook"),
        settings=ConsumerSettings(),
        registration=registration,
        transport=transport,
        marshaller=marshaller,
    )


@pytest.fixture()
def consumer(unregistered_consumer) -> FunctionalServiceConsumer:
    unregistered_consumer.register()
    return unregistered_consumer
