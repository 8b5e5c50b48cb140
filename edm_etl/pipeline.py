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

"""Pipeline orchestrator — runs a step chain over a batch of records.

Each record gets its own StepContext over one shared rdflib graph.
Steps run in order; the first Fail stops that record and is reported
with the record index and the failing step. Other records continue
unless fail_fast is set.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from rdflib import Graph

from edm_etl.context import Record, Step, StepContext, step_name
from edm_etl.logger import PipelineSummary, get_logger
from edm_etl.result import Fail, Ok, Result

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class RecordFailure:
    index: int
    failure: Fail


@dataclass
class PipelineRun:
    """Outcome of a batch: the populated graph plus per-record failures."""

    store: Graph
    records: list[Record] = field(default_factory=list)
    failures: list[RecordFailure] = field(default_factory=list)
    summary: PipelineSummary = field(default_factory=PipelineSummary)


def run_steps(
    steps: Sequence[Step],
    ctx: StepContext,
    summary: PipelineSummary | None = None,
) -> Result[Record]:
    """Run steps in order over one record, stopping at the first Fail."""
    for step in steps:
        name = step_name(step)
        result = step(ctx)
        counter = summary.counter(name) if summary is not None else None
        if not result.ok:
            if counter is not None:
                counter.failed += 1
            return result.at_step(name)
        if counter is not None:
            counter.ok += 1
    return Ok(data=ctx.record)


def run_pipeline(
    steps: Sequence[Step],
    records: Iterable[Record],
    store: Graph | None = None,
    fail_fast: bool = False,
) -> Result[PipelineRun]:
    """Run the step chain over every record against one shared graph.

    Args:
        steps: Ordered steps applied to each record.
        records: Input rows; each is copied before processing.
        store: Graph to populate and query. A fresh Graph when omitted.
        fail_fast: Stop the run at the first failing record.
    """
    run = PipelineRun(store=store if store is not None else Graph())

    for index, raw in enumerate(records):
        ctx = StepContext(record=dict(raw), store=run.store)
        result = run_steps(steps, ctx, run.summary)

        if not result.ok:
            run.summary.records_failed += 1
            run.failures.append(RecordFailure(index=index, failure=result))
            log.warning(
                "Record %d failed at step '%s' [%s]: %s",
                index,
                result.step,
                result.kind.value if result.kind else "error",
                result.error,
            )
            if result.context is not None:
                log.info("Record %d failure context: %s", index, result.context)
            if fail_fast:
                log.info(run.summary.report())
                return Fail(
                    error=f"Record {index} failed at step '{result.step}': {result.error}",
                    context=result,
                    kind=result.kind,
                    step=result.step,
                    cause=result.cause,
                )
            continue

        run.summary.records_ok += 1
        run.records.append(result.data)

    log.info("Graph holds %d triples", len(run.store))
    log.info(run.summary.report())
    return Ok(data=run)
