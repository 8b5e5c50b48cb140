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

"""Remote SPARQL endpoint engine using urllib.

POSTs the query to an endpoint and turns the response into a QueryResult:
SPARQL JSON results become rdflib rows or a boolean, any RDF response
body becomes a graph. Sources passed to ``execute`` are ignored; the
endpoint is the source.
"""

from __future__ import annotations

import http.client
import json
import ssl
import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Sequence
from typing import Any

import certifi
from rdflib import BNode, Graph, Literal, URIRef
from rdflib.term import Identifier

from edm_etl.logger import get_logger
from edm_etl.result import ErrorKind, Fail, Ok, Result
from edm_etl.sparql.engine import BINDINGS, BOOLEAN, QUADS, QueryResult, RowBinding

log = get_logger(__name__)

JsonTerm = dict[str, str]

_ssl_ctx = ssl.create_default_context(cafile=certifi.where())

_ACCEPT = "application/sparql-results+json, text/turtle;q=0.9, application/n-triples;q=0.8"


def term_from_json(raw: JsonTerm) -> Identifier:
    """Convert one SPARQL JSON result term to an rdflib term."""
    kind = raw.get("type")
    value = raw.get("value", "")
    if kind == "uri":
        return URIRef(value)
    if kind == "bnode":
        return BNode(value)
    if "xml:lang" in raw:
        return Literal(value, lang=raw["xml:lang"])
    if "datatype" in raw:
        return Literal(value, datatype=URIRef(raw["datatype"]))
    return Literal(value)


def _parse_json(raw: Any) -> QueryResult:
    if not isinstance(raw, dict):
        raise ValueError(f"expected a JSON object, got {type(raw).__name__}")
    if "boolean" in raw:
        return QueryResult(kind=BOOLEAN, boolean=bool(raw["boolean"]))
    rows: list[RowBinding] = [
        {var: term_from_json(term) for var, term in binding.items()}
        for binding in raw.get("results", {}).get("bindings", [])
    ]
    return QueryResult(kind=BINDINGS, rows=rows)


class EndpointEngine:
    """Query engine backed by a remote SPARQL endpoint."""

    def __init__(self, endpoint: str, timeout: int = 30) -> None:
        self.endpoint = endpoint
        self.timeout = timeout

    def execute(self, query: str, sources: Sequence[Graph] = ()) -> Result[QueryResult]:
        encoded_body = urllib.parse.urlencode({"query": query}).encode("utf-8")

        req = urllib.request.Request(
            self.endpoint,
            data=encoded_body,
            headers={
                "Content-Type": "application/x-www-form-urlencoded",
                "Accept": _ACCEPT,
            },
            method="POST",
        )

        log.info("SPARQL query → %s (%d bytes)", self.endpoint, len(encoded_body))

        try:
            with urllib.request.urlopen(req, timeout=self.timeout, context=_ssl_ctx) as resp:
                content_type = resp.headers.get("Content-Type", "").split(";")[0].strip()
                body = resp.read().decode("utf-8")
        except urllib.error.HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="replace")[:500]
            return Fail(
                error=f"SPARQL HTTP {exc.code}: {exc.reason}",
                context=detail,
                kind=ErrorKind.QUERY_EXECUTION,
                cause=exc,
            )
        except urllib.error.URLError as exc:
            return Fail(
                error=f"SPARQL connection error: {exc.reason}",
                kind=ErrorKind.QUERY_EXECUTION,
                cause=exc,
            )
        except TimeoutError as exc:
            return Fail(
                error=f"SPARQL timeout after {self.timeout}s",
                kind=ErrorKind.QUERY_EXECUTION,
                cause=exc,
            )
        except (OSError, http.client.HTTPException) as exc:
            return Fail(
                error=f"SPARQL response read failed: {type(exc).__name__}: {exc}",
                kind=ErrorKind.QUERY_EXECUTION,
                cause=exc,
            )
        except UnicodeDecodeError as exc:
            return Fail(
                error=f"SPARQL response is not valid UTF-8: {exc}",
                kind=ErrorKind.QUERY_EXECUTION,
                cause=exc,
            )

        if "json" in content_type:
            try:
                result = _parse_json(json.loads(body))
            except (ValueError, TypeError, AttributeError) as exc:
                return Fail(
                    error=f"Invalid SPARQL JSON response: {exc}",
                    context=body[:500],
                    kind=ErrorKind.QUERY_EXECUTION,
                    cause=exc,
                )
            log.info("SPARQL returned %s (%d rows)", result.kind, len(result.rows))
            return Ok(data=result)

        try:
            graph = Graph().parse(data=body, format=content_type or "turtle")
        except Exception as exc:
            return Fail(
                error=f"Unreadable SPARQL response ({content_type or 'no content type'}): {exc}",
                context=body[:500],
                kind=ErrorKind.QUERY_EXECUTION,
                cause=exc,
            )
        log.info("SPARQL returned graph with %d triples", len(graph))
        return Ok(data=QueryResult(kind=QUADS, graph=graph))
