from .config.settings import ConsumerSettings
from .consumer.functional_service import FunctionalServiceConsumer
from .errors import (
    AuthorizationError,
    FunctionalServiceError,
    HttpStatusError,
    JobValidationError,
    MarshallingError,
    NotRegisteredError,
    PhaseConflictError,
    RegistrationError,
    TransportError,
    UnsupportedOperationError,
)
from .model.environment import Environment, RightType, RightValue, Service, ServiceType, Zone
from .model.job import Job, JobState, Phase, PhaseState
from .model.responses import MultipleCreateResponse, MultipleDeleteResponse

__all__ = [
    "AuthorizationError",
    "ConsumerSettings",
    "Environment",
    "FunctionalServiceConsumer",
    "FunctionalServiceError",
    "HttpStatusError",
    "Job",
    "JobState",
    "JobValidationError",
    "MarshallingError",
    "MultipleCreateResponse",
    "MultipleDeleteResponse",
    "NotRegisteredError",
    "Phase",
    "PhaseConflictError",
    "PhaseState",
    "RegistrationError",
    "RightType",
    "RightValue",
    "Service",
    "ServiceType",
    "TransportError",
    "UnsupportedOperationError",
    "Zone",
]
