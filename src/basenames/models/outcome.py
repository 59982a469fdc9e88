"""
Caller-visible result of a single name resolution.

A [ResolutionOutcome][basenames.models.outcome.ResolutionOutcome] is the
only value that crosses the public boundary of
[BaseNameResolver.resolve()][basenames.resolver.service.BaseNameResolver.resolve]:
failures are reported as data, never raised.

Three shapes are possible:

* resolved with an address -- ``address`` set, ``error`` is ``None``;
* resolved without a record -- ``address`` and ``error`` both ``None``;
* failed -- ``error`` and ``error_kind`` set, ``address`` is ``None``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ._validation import validate_hex_address, validate_instance
from .constants import ErrorKind, ResolutionState


@dataclass(frozen=True, slots=True)
class ResolutionOutcome:
    """Immutable result of resolving one name.

    Attributes:
        name: The normalized name, or the raw input when normalization
            never happened (invalid format, wrong suffix).
        address: EIP-55 checksum address, or ``None`` when unresolved.
        error: Human-readable failure description, or ``None``.
        error_kind: [ErrorKind][basenames.models.constants.ErrorKind] of the
            failure, set together with ``error``.
        trace: States visited by the state machine, ending in ``RESOLVED``
            or ``FAILED``.

    Raises:
        ValueError: If ``error`` and ``error_kind`` disagree, if both an
            address and an error are set, or if the trace does not end in a
            terminal state matching the error.

    Examples:
        ```python
        outcome = ResolutionOutcome.resolved("jesse.base.eth", "0x849151d7D0bF1F34b70d5caD5149D28CC2308bf1")
        outcome.ok       # True
        outcome.state    # ResolutionState.RESOLVED

        foreign = ResolutionOutcome.failed("jesse.com", ErrorKind.WRONG_SUFFIX, "not a base.eth name")
        foreign.to_dict()
        # {'name': 'jesse.com', 'address': None, 'error': 'not a base.eth name',
        #  'error_kind': 'wrong_suffix', 'state': 'failed'}
        ```
    """

    name: str
    address: str | None = None
    error: str | None = None
    error_kind: ErrorKind | None = None
    trace: tuple[ResolutionState, ...] = field(default=(), compare=False)

    def __post_init__(self) -> None:
        validate_instance(self.name, str, "name")
        if self.address is not None:
            validate_hex_address(self.address, "address")
        if self.error is not None:
            validate_instance(self.error, str, "error")
        if (self.error is None) != (self.error_kind is None):
            raise ValueError("error and error_kind must be set together")
        if self.error_kind is not None:
            validate_instance(self.error_kind, ErrorKind, "error_kind")
        if self.address is not None and self.error is not None:
            raise ValueError("an outcome cannot carry both an address and an error")

        terminal = ResolutionState.FAILED if self.error is not None else ResolutionState.RESOLVED
        if not self.trace:
            object.__setattr__(self, "trace", (terminal,))
        elif self.trace[-1] != terminal:
            raise ValueError(f"trace must end in {terminal}, got {self.trace[-1]}")

    @classmethod
    def resolved(
        cls,
        name: str,
        address: str | None,
        trace: tuple[ResolutionState, ...] = (),
    ) -> ResolutionOutcome:
        """Build a successful outcome (``address`` may be ``None`` for "no record")."""
        return cls(name=name, address=address, trace=(*trace, ResolutionState.RESOLVED))

    @classmethod
    def failed(
        cls,
        name: str,
        kind: ErrorKind,
        error: str,
        trace: tuple[ResolutionState, ...] = (),
    ) -> ResolutionOutcome:
        """Build a failed outcome of the given kind."""
        return cls(
            name=name,
            error=error or kind.value,
            error_kind=kind,
            trace=(*trace, ResolutionState.FAILED),
        )

    @property
    def ok(self) -> bool:
        """Whether the resolution succeeded (with or without a record)."""
        return self.error is None

    @property
    def state(self) -> ResolutionState:
        """Terminal state of the resolution."""
        return self.trace[-1]

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dictionary."""
        return {
            "name": self.name,
            "address": self.address,
            "error": self.error,
            "error_kind": self.error_kind.value if self.error_kind is not None else None,
            "state": self.state.value,
        }
