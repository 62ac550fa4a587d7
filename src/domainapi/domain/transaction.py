"""Transaction staging: pure value transitions.

``start`` creates an empty Transaction, ``stage`` returns a new value
with one more task, ``commit`` reports a Result.  No function here
mutates its input and nothing is persisted.

Intended lifecycle: created -> staging (0..n) -> committed.  The values
carry no status field, so the forward-only order is not enforced.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from domainapi.domain.context import filter_context
from domainapi.domain.freeze import FrozenDict, freeze, thaw


@dataclass(frozen=True)
class StagedTask:
    """One recorded action call."""

    name: str
    args: FrozenDict = field(default_factory=FrozenDict)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "args": thaw(self.args)}


@dataclass(frozen=True)
class Transaction:
    """Append-only batch of staged actions for one aggregate."""

    id: str
    repository: Any
    ctxt: FrozenDict
    tasks: tuple[StagedTask, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "repository": thaw(self.repository),
            "ctxt": thaw(self.ctxt),
            "tasks": [task.to_dict() for task in self.tasks],
        }


@dataclass(frozen=True)
class Result:
    """Outcome of a commit."""

    id: str
    success: bool

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "success": self.success}


def _new_id() -> str:
    return str(uuid.uuid4())


def start(
    repository: Any,
    context: Any = None,
    *,
    id_factory: Callable[[], str] = _new_id,
) -> Transaction:
    """Open a new, empty Transaction bound to *repository*."""
    return Transaction(
        id=id_factory(),
        repository=freeze(repository),
        ctxt=filter_context(context),
    )


def stage(
    transaction: Transaction, action: str, args: Mapping[str, Any] | None = None
) -> Transaction:
    """Return a copy of *transaction* with ``action(args)`` appended."""
    task = StagedTask(name=action, args=freeze(args or {}))
    return replace(transaction, tasks=(*transaction.tasks, task))


def commit(transaction: Transaction) -> Result:
    """Report the transaction as committed.

    Staged tasks are neither executed nor persisted; success is always
    reported.
    """
    return Result(id=transaction.id, success=True)
