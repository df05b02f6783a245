from typing import List, Protocol

from ..model.environment import Environment
from ..model.job import Job
from ..model.responses import MultipleCreateResponse, MultipleDeleteResponse


class Marshaller(Protocol):
    def serialise_job(self, job: Job) -> str:
        ...

    def deserialise_job(self, payload: str) -> Job:
        ...

    def serialise_jobs(self, jobs: List[Job]) -> str:
        ...

    def deserialise_jobs(self, payload: str) -> List[Job]:
        ...

    def serialise_create_response(self, response: MultipleCreateResponse) -> str:
        ...

    def deserialise_create_response(self, payload: str) -> MultipleCreateResponse:
        ...

    def serialise_delete_request(self, ids: List[str]) -> str:
        ...

    def deserialise_delete_request(self, payload: str) -> List[str]:
        ...

    def serialise_delete_response(self, response: MultipleDeleteResponse) -> str:
        ...

    def deserialise_delete_response(self, payload: str) -> MultipleDeleteResponse:
        ...

    def serialise_environment(self, environment: Environment) -> str:
        ...

    def deserialise_environment(self, payload: str) -> Environment:
        ...
