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

"""Query engine contract and the in-process rdflib engine.

An engine runs a query string against a list of sources and returns a
QueryResult tagged with its kind:

  bindings — SELECT rows, each a dict of variable name → term
  boolean  — ASK answer
  quads    — CONSTRUCT / DESCRIBE graph
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

from pyparsing import ParseBaseException
from rdflib import Graph
from rdflib.graph import ReadOnlyGraphAggregate
from rdflib.term import Identifier

from edm_etl.logger import get_logger
from edm_etl.result import ErrorKind, Fail, Ok, Result

log = get_logger(__name__)

RowBinding = dict[str, Identifier]

BINDINGS = "bindings"
BOOLEAN = "boolean"
QUADS = "quads"

_RDFLIB_KINDS = {
    "SELECT": BINDINGS,
    "ASK": BOOLEAN,
    "CONSTRUCT": QUADS,
    "DESCRIBE": QUADS,
}


@dataclass(frozen=True, slots=True)
class QueryResult:
    kind: str
    rows: list[RowBinding] = field(default_factory=list)
    boolean: bool | None = None
    graph: Graph | None = None

    def bindings(self) -> list[RowBinding]:
        """Ordered solution rows. Empty unless kind is ``bindings``."""
        return list(self.rows)


class QueryEngine(Protocol):
    def execute(self, query: str, sources: Sequence[Graph]) -> Result[QueryResult]: ...


def _query_target(sources: Sequence[Graph]) -> Graph:
    if len(sources) == 1:
        return sources[0]
    return ReadOnlyGraphAggregate(list(sources))


def _rows(raw) -> list[RowBinding]:
    # unbound variables are left out of the row
    return [{str(var): term for var, term in row.asdict().items()} for row in raw]


class RdflibEngine:
    """Evaluates SPARQL in-process over rdflib graphs. Never mutates them."""

    def execute(self, query: str, sources: Sequence[Graph]) -> Result[QueryResult]:
        if not sources:
            return Fail(error="No query sources given", kind=ErrorKind.QUERY_EXECUTION)

        try:
            raw = _query_target(sources).query(query)
            rows = _rows(raw) if raw.type == "SELECT" else []
        except ParseBaseException as exc:
            return Fail(
                error=f"Failed to parse query: {exc}",
                context=query[:200],
                kind=ErrorKind.QUERY_EXECUTION,
                cause=exc,
            )
        except Exception as exc:
            return Fail(
                error=f"{type(exc).__name__}: {exc}",
                context=query[:200],
                kind=ErrorKind.QUERY_EXECUTION,
                cause=exc,
            )

        kind = _RDFLIB_KINDS.get(raw.type, raw.type.lower())
        if kind == BINDINGS:
            log.debug("Local query returned %d rows", len(rows))
            return Ok(data=QueryResult(kind=kind, rows=rows))
        if kind == BOOLEAN:
            return Ok(data=QueryResult(kind=kind, boolean=bool(raw.askAnswer)))
        return Ok(data=QueryResult(kind=kind, graph=raw.graph))
