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

"""Turns a WorkflowConfig into runnable pieces: registry, engine, steps, records.

Term strings in step parameters are either full IRIs (``https://…``,
``urn:…``) or compact ``alias:local`` names resolved through the registry.
"""

from __future__ import annotations

import csv
from collections.abc import Callable
from typing import Any

from rdflib import URIRef

from edm_etl.config import EngineConfig, SourceConfig, StepSpec, WorkflowConfig
from edm_etl.context import Record, Step
from edm_etl.logger import get_logger
from edm_etl.namespaces import DEFAULT_REGISTRY, NamespaceRegistry, UnknownPrefixError
from edm_etl.result import ErrorKind, Fail, Ok, Result
from edm_etl.sparql.client import EndpointEngine
from edm_etl.sparql.engine import QueryEngine, RdflibEngine
from edm_etl.sparql.select import sparql_select
from edm_etl.steps import FieldRef, Position, hashed_iri, split, string_to_iri, triple
from edm_etl.terms import iri_from_alias, iri_from_string

log = get_logger(__name__)

StepFactory = Callable[[dict[str, Any], NamespaceRegistry, QueryEngine], Step]


def build_registry(config: WorkflowConfig) -> NamespaceRegistry:
    return DEFAULT_REGISTRY.extend(config.namespaces)


def build_engine(config: EngineConfig) -> Result[QueryEngine]:
    if config.type == "local":
        return Ok(data=RdflibEngine())
    if config.type == "endpoint":
        if not config.endpoint:
            return Fail(error="Endpoint engine requires 'endpoint'", kind=ErrorKind.CONFIG)
        return Ok(data=EndpointEngine(config.endpoint, timeout=config.timeout))
    return Fail(error=f"Unknown engine type: {config.type!r}", kind=ErrorKind.CONFIG)


# ── Term parameters ───────────────────────────────────────────

def parse_term(value: str, registry: NamespaceRegistry) -> URIRef:
    """``alias:local`` through the registry, anything with ``//`` or ``urn:`` verbatim."""
    if "//" in value or value.startswith("urn:"):
        return iri_from_string(value)
    alias, sep, local = value.partition(":")
    if not sep:
        raise UnknownPrefixError(f"Not an IRI or alias:local name: {value!r}")
    return iri_from_alias(alias, local, registry)


def _position(raw: Any, registry: NamespaceRegistry) -> Position:
    if isinstance(raw, str):
        return parse_term(raw, registry)
    datatype = raw.get("datatype")
    prefix = raw.get("prefix")
    return FieldRef(
        key=raw["field"],
        as_iri=bool(raw.get("iri", False) or prefix),
        namespace=registry.resolve(prefix) if prefix else None,
        datatype=parse_term(datatype, registry) if datatype else None,
        language=raw.get("language"),
    )


# ── Step factories ────────────────────────────────────────────

def _hashed_iri(params: dict[str, Any], registry: NamespaceRegistry, engine: QueryEngine) -> Step:
    return hashed_iri(
        params["key"],
        registry.resolve(params["prefix"]),
        list(params["fields"]),
        missing=params.get("missing", "fail"),
    )


def _split(params: dict[str, Any], registry: NamespaceRegistry, engine: QueryEngine) -> Step:
    return split(params["key"], params.get("separator", ","))


def _code(raw: Any) -> str:
    # YAML reads bare NO, ON, 1 as bool or int; str() would store "False" or "1"
    if not isinstance(raw, str):
        raise ValueError(
            f"code {raw!r} is a {type(raw).__name__}, not a string; quote it in the workflow"
        )
    return raw


def _string_to_iri(params: dict[str, Any], registry: NamespaceRegistry, engine: QueryEngine) -> Step:
    table = {_code(code): parse_term(target, registry) for code, target in params["table"].items()}
    nulls = ["" if n is None else str(n) for n in params.get("nulls", [])]
    return string_to_iri(params["key"], table, nulls)


def _triple(params: dict[str, Any], registry: NamespaceRegistry, engine: QueryEngine) -> Step:
    return triple(
        _position(params["subject"], registry),
        _position(params["predicate"], registry),
        _position(params["object"], registry),
    )


def _sparql_select(params: dict[str, Any], registry: NamespaceRegistry, engine: QueryEngine) -> Step:
    return sparql_select(params["key"], params["query"], engine)


STEP_FACTORIES: dict[str, StepFactory] = {
    "hashed_iri": _hashed_iri,
    "split": _split,
    "string_to_iri": _string_to_iri,
    "triple": _triple,
    "sparql_select": _sparql_select,
}


def build_steps(
    specs: list[StepSpec],
    registry: NamespaceRegistry,
    engine: QueryEngine,
) -> Result[list[Step]]:
    """Instantiate each StepSpec through its factory, in order."""
    steps: list[Step] = []
    for index, spec in enumerate(specs):
        factory = STEP_FACTORIES.get(spec.name)
        if factory is None:
            return Fail(
                error=f"Unknown step '{spec.name}' at position {index}",
                context=sorted(STEP_FACTORIES),
                kind=ErrorKind.CONFIG,
            )
        try:
            steps.append(factory(spec.params, registry, engine))
        except (KeyError, TypeError, AttributeError, ValueError) as exc:
            return Fail(
                error=f"Invalid parameters for step '{spec.name}' at position {index}: {exc}",
                context=spec.params,
                kind=ErrorKind.CONFIG,
            )
    log.info("Built %d steps", len(steps))
    return Ok(data=steps)


# ── Records ───────────────────────────────────────────────────

def load_records(source: SourceConfig) -> Result[list[Record]]:
    """Read input rows from the CSV file, or take the inline records."""
    if source.csv is None:
        return Ok(data=[dict(r) for r in source.records])

    try:
        with source.csv.open(encoding="utf-8", newline="") as fh:
            records = [dict(row) for row in csv.DictReader(fh, delimiter=source.delimiter)]
    except OSError as exc:
        return Fail(error=f"Cannot read records: {exc}", context=str(source.csv), kind=ErrorKind.CONFIG)
    except csv.Error as exc:
        return Fail(error=f"CSV error: {exc}", context=str(source.csv), kind=ErrorKind.CONFIG)

    log.info("Loaded %d records from %s", len(records), source.csv.name)
    return Ok(data=records)
