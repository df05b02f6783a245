from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class ResponseError:
    id: Optional[str]
    code: int
    scope: Optional[str] = None
    message: Optional[str] = None
    description: Optional[str] = None


@dataclass
class CreateStatus:
    id: Optional[str]
    status_code: int
    advisory_id: Optional[str] = None
    error: Optional[ResponseError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.status_code < 400


@dataclass
class DeleteStatus:
    id: str
    status_code: int
    error: Optional[ResponseError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.status_code < 400


@dataclass
class UpdateStatus:
    id: str
    status_code: int
    error: Optional[ResponseError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.status_code < 400


@dataclass
class MultipleCreateResponse:
    status_records: List[CreateStatus] = field(default_factory=list)

    @property
    def succeeded(self) -> List[CreateStatus]:
        return [record for record in self.status_records if record.ok]

    @property
    def failed(self) -> List[CreateStatus]:
        return [record for record in self.status_records if not record.ok]


@dataclass
class MultipleDeleteResponse:
    status_records: List[DeleteStatus] = field(default_factory=list)

    @property
    def succeeded(self) -> List[DeleteStatus]:
        return [record for record in self.status_records if record.ok]

    @property
    def failed(self) -> List[DeleteStatus]:
        return [record for record in self.status_records if not record.ok]


@dataclass
class MultipleUpdateResponse:
    status_records: List[UpdateStatus] = field(default_factory=list)
