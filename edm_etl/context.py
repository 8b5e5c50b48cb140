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

"""Per-record step context and the step signature."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from rdflib import Graph

from edm_etl.result import ErrorKind, Fail, Ok, Result

Record = dict[str, Any]


@dataclass(slots=True)
class StepContext:
    """The record being processed and the shared graph store."""

    record: Record
    store: Graph


Step = Callable[[StepContext], Result[Record]]


def get_field(record: Record, key: str) -> Result[Any]:
    """Read a field, failing when it is absent or was cleared to None."""
    value = record.get(key)
    if value is None:
        return Fail(
            error=f"Field '{key}' is missing from the record",
            context=key,
            kind=ErrorKind.MISSING_FIELD,
        )
    return Ok(data=value)


def named(label: str) -> Callable[[Step], Step]:
    """Attach a display name to a step, used in logs and failure reports."""
    def _wrap(step: Step) -> Step:
        step.__name__ = label  # type: ignore[attr-defined]
        return step
    return _wrap


def step_name(step: Step) -> str:
    return getattr(step, "__name__", repr(step))
