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

"""Embedded SELECT query step.

Runs a SPARQL SELECT over the graph built so far and stores the solution
rows on the record. Anything other than row bindings means the caller
wrote the wrong kind of query, and the record fails.
"""

from __future__ import annotations

from edm_etl.context import Record, Step, StepContext, named
from edm_etl.logger import get_logger
from edm_etl.result import ErrorKind, Fail, Ok, Result
from edm_etl.sparql.engine import BINDINGS, QueryEngine, RdflibEngine

log = get_logger(__name__)


def sparql_select(key: str, query: str, engine: QueryEngine | None = None) -> Step:
    """Store the rows of ``query`` under ``key``.

    Args:
        key: Destination field on the record.
        query: A SELECT query. ASK, CONSTRUCT and DESCRIBE are rejected.
        engine: Query engine; defaults to in-process rdflib over ``ctx.store``.
    """
    engine = engine or RdflibEngine()

    @named(f"sparql_select({key})")
    def _sparql_select(ctx: StepContext) -> Result[Record]:
        try:
            executed = engine.execute(query, sources=[ctx.store])
        except Exception as exc:
            return Fail(
                error=f"While executing SPARQL SELECT query: {type(exc).__name__}: {exc}",
                context={"query": query[:200]},
                kind=ErrorKind.QUERY_EXECUTION,
                cause=exc,
            )
        if not executed.ok:
            return Fail(
                error=f"While executing SPARQL SELECT query: {executed.error}",
                context={"query": query[:200], "detail": executed.context},
                kind=ErrorKind.QUERY_EXECUTION,
                cause=executed.cause,
            )

        result = executed.data
        if result.kind != BINDINGS:
            return Fail(
                error=(
                    f"Expected SPARQL query to return bindings, but received: {result.kind}. "
                    "Only SELECT queries can be embedded in a record."
                ),
                context=result.kind,
                kind=ErrorKind.UNEXPECTED_RESULT_KIND,
            )

        ctx.record[key] = result.bindings()
        log.debug("Stored %d rows under '%s'", len(ctx.record[key]), key)
        return Ok(data=ctx.record)

    return _sparql_select
