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

"""
EDM ETL — record pipeline runner

Reads a YAML workflow definition, loads records from CSV (or inline),
runs the configured step chain over every record against one shared
rdflib graph, and serializes the graph.

Steps: hashed_iri, split, string_to_iri, triple, sparql_select

Usage: python main.py --workflow=workflows/objects.yaml [--output=out.ttl]
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from rdflib import Graph

from edm_etl.config import load_config
from edm_etl.logger import get_logger
from edm_etl.pipeline import run_pipeline
from edm_etl.workflow import build_engine, build_registry, build_steps, load_records

log = get_logger("main")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="edm-etl",
        description="Execute a YAML workflow: records → steps → RDF graph",
    )
    parser.add_argument(
        "--workflow",
        type=Path,
        required=True,
        help="Path to workflow YAML (e.g. workflows/objects.yaml)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Output file for the graph (overrides output.path in the workflow)",
    )
    args = parser.parse_args(argv)

    workflow = args.workflow.resolve()
    cfg_result = load_config(workflow)
    if not cfg_result.ok:
        log.error(cfg_result.error)
        return 1
    config = cfg_result.data

    registry = build_registry(config)

    engine_result = build_engine(config.engine)
    if not engine_result.ok:
        log.error(engine_result.error)
        return 1

    steps_result = build_steps(config.steps, registry, engine_result.data)
    if not steps_result.ok:
        log.error(steps_result.error)
        return 1

    records_result = load_records(config.source)
    if not records_result.ok:
        log.error(records_result.error)
        return 1

    store = Graph()
    for alias, binding in registry.items():
        store.bind(alias, binding.base)

    log.info("Workflow: %s", workflow.name)

    result = run_pipeline(
        steps_result.data,
        records_result.data,
        store=store,
        fail_fast=config.fail_fast,
    )
    if not result.ok:
        log.error("Pipeline failed: %s", result.error)
        return 1

    output = args.output.resolve() if args.output else config.output.path
    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        store.serialize(destination=str(output), format=config.output.format)
        log.info("Output: %s (%d triples)", output, len(store))
    else:
        sys.stdout.write(store.serialize(format=config.output.format))

    return 1 if result.data.failures else 0


if __name__ == "__main__":
    sys.exit(main())
