"""Issue contract - Core issue representation and the value objects exchanged with the tracker."""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class WorkflowAction:
    """A transition available from an issue's *current* state.

    The set of actions depends on where the issue sits in its workflow, so it
    is fetched fresh for every transition request and never cached.
    """

    name: str
    id: str

    def matches(self, action_name: str) -> bool:
        """Return True if the name equals action_name ignoring case (no fuzzy matching)."""
        #"straße" must not match "STRASSE"
        return self.name.lower() == action_name.lower()


@dataclass(frozen=True)
class Comment:
    """Write-only comment body. Nothing is tracked after it is posted."""

    body: str


@dataclass(frozen=True)
class FieldUpdate:
    """New value(s) for a single issue field.

    The remote protocol replaces a multi-valued field wholesale, so every value
    the field should end up with has to travel in the same record.
    """

    field_id: str
    values: tuple[str, ...]

    @classmethod
    def of(cls, field_id: str, values: str | Iterable[str]) -> "FieldUpdate":
        #a bare string is one value, not a sequence of characters
        if isinstance(values, str):
            return cls(field_id, (values,))
        return cls(field_id, tuple(values))


@dataclass(frozen=True)
class Version:
    """Project version as defined on the tracker."""

    id: str
    name: str
    released: bool = False
    archived: bool = False
    release_date: str | None = None


@dataclass(frozen=True)
class CustomField:
    """Custom field defined on the tracker instance."""

    id: str
    name: str


class Issue(ABC):
    """Abstract base class representing an issue."""

    @property
    @abstractmethod
    def key(self) -> str:
        """Return the unique issue key (e.g. 'PROJ-42')."""
        raise NotImplementedError

    @property
    @abstractmethod
    def summary(self) -> str:
        """Return the one-line summary of the issue."""
        raise NotImplementedError

    @property
    @abstractmethod
    def status(self) -> str | None:
        """Return the tracker's status identifier, or None if the payload carried none."""
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<Issue key={self.key!r} summary={self.summary!r} status={self.status!r}>"
