import base64
import logging
from typing import Optional, Tuple

from ..config.settings import ConsumerSettings
from ..errors import HttpStatusError, RegistrationError
from ..model.environment import Environment
from ..serialisation.interfaces import Marshaller
from ..shared.logging import get_logger, log_event
from ..transport.interfaces import Transport
from .interfaces import RegistrationService, Session, SessionKey, SessionStore
from .memory_store import MemorySessionStore

logger = get_logger("registration")


def basic_authorisation(username: str, secret: str) -> str:
    credentials = base64.b64encode(f"{username}:{secret}".encode("utf-8")).decode("ascii")
    return f"Basic {credentials}"


class EnvironmentRegistrationService(RegistrationService):
    """Registers a consumer with an environment provider using DIRECT mode.

    A session stored for the same application key, solution, user token and
    instance is reused instead of creating a new environment.
    """

    def __init__(
        self,
        settings: ConsumerSettings,
        transport: Transport,
        marshaller: Marshaller,
        session_store: Optional[SessionStore] = None,
    ) -> None:
        self._settings = settings
        self._transport = transport
        self._marshaller = marshaller
        self._sessions = session_store or MemorySessionStore()
        self._environment: Optional[Environment] = None
        self._environment_url: Optional[str] = None
        self._token: Optional[str] = None
        self._key: Optional[SessionKey] = None

    @property
    def registered(self) -> bool:
        return self._environment is not None

    @property
    def authorisation_token(self) -> Optional[str]:
        return self._token

    def register(self, template: Environment) -> Environment:
        if self._environment is not None:
            return self._environment

        secret = self._settings.shared_secret
        if not secret:
            raise RegistrationError("A shared secret is required to register")
        if not template.application_key:
            raise RegistrationError("An application key is required to register")

        key = SessionKey(
            application_key=template.application_key,
            solution_id=template.solution_id,
            user_token=template.user_token,
            instance_id=template.instance_id,
        )
        session = self._sessions.get(key)
        environment = None
        if session is not None:
            environment = self._resume(key, session, secret)
        if environment is None:
            environment, session = self._create(key, template, secret)

        self._environment = environment
        self._environment_url = session.environment_url
        self._token = basic_authorisation(session.session_token, secret)
        self._key = key
        return environment

    def unregister(self, delete_on_unregister: Optional[bool] = None) -> None:
        if self._environment is None:
            return
        delete = self._settings.delete_on_unregister if delete_on_unregister is None else delete_on_unregister
        if delete:
            self._transport.delete(self._environment_url, self._token)
            self._sessions.remove(self._key)
        log_event(logger, "registration.unregistered", environment_id=self._environment.id, deleted=delete)
        self._environment = None
        self._environment_url = None
        self._token = None
        self._key = None

    def _resume(self, key: SessionKey, session: Session, secret: str) -> Optional[Environment]:
        token = basic_authorisation(session.session_token, secret)
        try:
            xml = self._transport.get(session.environment_url, token)
        except HttpStatusError as exc:
            if not exc.is_not_found:
                raise
            log_event(
                logger, "registration.session_expired", logging.WARNING, application_key=key.application_key
            )
            self._sessions.remove(key)
            return None
        environment = self._marshaller.deserialise_environment(xml)
        if not environment.session_token:
            environment.session_token = session.session_token
        log_event(logger, "registration.resumed", environment_id=environment.id)
        return environment

    def _create(self, key: SessionKey, template: Environment, secret: str) -> Tuple[Environment, Session]:
        if not self._settings.environment_url:
            raise RegistrationError("SIF_CONSUMER_ENVIRONMENT_URL is required to register")
        body = self._marshaller.serialise_environment(template)
        token = basic_authorisation(template.application_key, secret)
        xml = self._transport.post(self._settings.environment_url, token, body)
        environment = self._marshaller.deserialise_environment(xml)
        if not environment.session_token:
            raise RegistrationError("Environment provider did not return a session token")
        environment_url = environment.infrastructure_services.get("environment")
        if not environment_url:
            environment_url = f"{self._settings.environment_url.rstrip('/')}/{environment.id}"
        session = Session(session_token=environment.session_token, environment_url=environment_url)
        self._sessions.put(key, session)
        log_event(logger, "registration.created", environment_id=environment.id)
        return environment, session
