# SPDX-License-Identifier: MIT
#
#  █████╗ ██████╗  █████╗ ███████╗
# ██╔══██╗██╔══██╗██╔══██╗██╔════╝
# ███████║██████╔╝███████║███████╗
# ██╔══██║██╔══██╗██╔══██║╚════██║
# ██║  ██║██║  ██║██║  ██║███████║
# ╚═╝  ╚═╝╚═╝  ╚═╝╚═╝  ╚═╝╚══════╝
# Copyright (C) 2026 Riza Emre ARAS <r.emrearas@proton.me>
#
# Licensed under the MIT License.
# See LICENSE and THIRD_PARTY_LICENSES for details.

"""Result pattern for record-level error handling.

Every pipeline step returns Result[Record] = Ok[Record] | Fail.
A Fail carries the error kind and the name of the step that produced it,
so the orchestrator can report which record failed where, and why.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Failure taxonomy shared by all steps."""

    UNEXPECTED_RESULT_KIND = "unexpected-result-kind"
    QUERY_EXECUTION = "query-execution"
    LOOKUP_MISS = "lookup-miss"
    MISSING_FIELD = "missing-field"
    INVALID_VALUE = "invalid-value"
    CONFIG = "config"


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result carrying typed data."""

    data: T
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True, slots=True)
class Fail:
    """Failed result.

    ``cause`` keeps the original exception when the failure wraps one
    (query engine errors), ``step`` is stamped by the orchestrator.
    """

    error: str
    context: Any = None
    kind: ErrorKind | None = None
    step: str | None = None
    cause: BaseException | None = None
    ok: bool = field(default=False, init=False)

    def at_step(self, step: str) -> Fail:
        """Return a copy tagged with the failing step name."""
        if self.step is not None:
            return self
        return replace(self, step=step)


Result = Ok[T] | Fail
