from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Union

from ..errors import JobValidationError, PhaseConflictError


class JobState(str, Enum):
    NOTSTARTED = "NOTSTARTED"
    INPROGRESS = "INPROGRESS"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class PhaseState(str, Enum):
    NOTAPPLICABLE = "NOTAPPLICABLE"
    NOTSTARTED = "NOTSTARTED"
    PENDING = "PENDING"
    SKIPPED = "SKIPPED"
    INPROGRESS = "INPROGRESS"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class StateRecord:
    type: PhaseState
    description: Optional[str]
    created: datetime
    last_modified: datetime


def _stamp(
    target: Union["Job", "Phase"],
    state: Union[JobState, PhaseState],
    description: Optional[str],
) -> datetime:
    # The local clock may step backwards; last_modified must not.
    now = utcnow()
    previous = target._last_modified
    if previous is not None and now < previous:
        now = previous
    target._state = state
    target._state_description = description
    target._last_modified = now
    return now


class Phase:
    def __init__(self, name: str, required: bool = True) -> None:
        if not name or not name.strip():
            raise JobValidationError("Phase must have a name")
        self._name = name
        self.required = required
        self._state: Optional[PhaseState] = None
        self._state_description: Optional[str] = None
        self._last_modified: Optional[datetime] = None
        self.states: List[StateRecord] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def state(self) -> Optional[PhaseState]:
        return self._state

    @property
    def state_description(self) -> Optional[str]:
        return self._state_description

    @property
    def last_modified(self) -> Optional[datetime]:
        return self._last_modified

    def change_state(self, state: PhaseState, description: Optional[str] = None) -> StateRecord:
        stamped = _stamp(self, state, description)
        record = StateRecord(type=state, description=description, created=stamped, last_modified=stamped)
        self.states.append(record)
        return record

    @classmethod
    def restore(cls, name: str, required: bool, states: List[StateRecord]) -> "Phase":
        phase = cls(name, required=required)
        phase.states = list(states)
        if states:
            latest = states[-1]
            phase._state = latest.type
            phase._state_description = latest.description
            phase._last_modified = latest.last_modified
        return phase

    def __repr__(self) -> str:
        return f"Phase(name={self._name!r}, state={self._state!r})"


class Job:
    """A named unit of work executed by a Functional Service.

    The instance mirrors remote state: mutators only do bookkeeping and never
    talk to the service, and no transition between states is forbidden.
    """

    def __init__(self, name: str, description: Optional[str] = None) -> None:
        if not name or not name.strip() or " " in name:
            raise JobValidationError("Job must have a name, which cannot contain any spaces")
        self._name = name
        self.id: Optional[str] = None
        self.description = description if description and description.strip() else None
        self.timeout: Optional[str] = None
        self._state: Optional[JobState] = None
        self._state_description: Optional[str] = None
        self._created = utcnow()
        self._last_modified: Optional[datetime] = self._created
        self._phases: Dict[str, Phase] = {}

    @property
    def name(self) -> str:
        return self._name

    @property
    def state(self) -> Optional[JobState]:
        return self._state

    @property
    def state_description(self) -> Optional[str]:
        return self._state_description

    @property
    def created(self) -> datetime:
        return self._created

    @property
    def last_modified(self) -> datetime:
        return self._last_modified

    @property
    def phases(self) -> Mapping[str, Phase]:
        """Read-only view of the phases, keyed by name.

        Only ``update_phase_state`` moves the Job's ``last_modified``; calling
        ``change_state`` on a Phase from this view leaves the Job untouched.
        """
        return MappingProxyType(self._phases)

    def change_state(self, state: JobState, description: Optional[str] = None) -> None:
        _stamp(self, state, description)

    def add_phase(self, phase: Phase) -> None:
        if phase.name in self._phases:
            raise PhaseConflictError(f"Job {self._name} already has a phase named {phase.name}")
        self._phases[phase.name] = phase

    def update_phase_state(
        self, phase_name: str, state: PhaseState, description: Optional[str] = None
    ) -> StateRecord:
        record = self._phases[phase_name].change_state(state, description)
        if record.last_modified > self._last_modified:
            self._last_modified = record.last_modified
        return record

    @classmethod
    def restore(
        cls,
        name: str,
        id: Optional[str] = None,
        description: Optional[str] = None,
        state: Optional[JobState] = None,
        state_description: Optional[str] = None,
        created: Optional[datetime] = None,
        last_modified: Optional[datetime] = None,
        timeout: Optional[str] = None,
        phases: Optional[List[Phase]] = None,
    ) -> "Job":
        """Rebuild a Job from fields reported by the remote service."""
        job = cls(name, description)
        job.id = id
        job.timeout = timeout
        job._state = state
        job._state_description = state_description
        if created is not None:
            job._created = created
        job._last_modified = max(last_modified or job._created, job._created)
        for phase in phases or []:
            job.add_phase(phase)
        return job

    def __repr__(self) -> str:
        return f"Job(name={self._name!r}, id={self.id!r}, state={self._state!r})"
