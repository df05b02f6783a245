from dataclasses import dataclass
from typing import Optional, Protocol

from ..model.environment import Environment


@dataclass(frozen=True)
class SessionKey:
    application_key: str
    solution_id: Optional[str] = None
    user_token: Optional[str] = None
    instance_id: Optional[str] = None


@dataclass
class Session:
    session_token: str
    environment_url: str


class SessionStore(Protocol):
    def get(self, key: SessionKey) -> Optional[Session]:
        ...

    def put(self, key: SessionKey, session: Session) -> None:
        ...

    def remove(self, key: SessionKey) -> None:
        ...


class RegistrationService(Protocol):
    @property
    def registered(self) -> bool:
        ...

    @property
    def authorisation_token(self) -> Optional[str]:
        ...

    def register(self, template: Environment) -> Environment:
        ...

    def unregister(self, delete_on_unregister: Optional[bool] = None) -> None:
        ...
