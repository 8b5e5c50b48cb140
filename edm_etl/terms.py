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

"""Term builders — IRIs and literals from simple inputs.

Each call shape has its own named constructor. ``iri`` and ``literal``
are thin dispatchers over them for call sites that want one entry point.
No validation is performed on the resulting terms.
"""

from __future__ import annotations

from rdflib import XSD, Literal, URIRef

from edm_etl.namespaces import DEFAULT_REGISTRY, NamespaceBinding, NamespaceRegistry


# ── IRIs ───────────────────────────────────────────────────────

def iri_from_string(value: str) -> URIRef:
    return URIRef(value)


def iri_from_namespace(binding: NamespaceBinding, local: str) -> URIRef:
    return binding(local)


def iri_from_alias(
    alias: str,
    local: str,
    registry: NamespaceRegistry = DEFAULT_REGISTRY,
) -> URIRef:
    """Resolve ``alias`` through the registry, then concatenate ``local``."""
    return iri_from_namespace(registry.resolve(alias), local)


def iri(
    value: str | NamespaceBinding,
    local: str | None = None,
    registry: NamespaceRegistry = DEFAULT_REGISTRY,
) -> URIRef:
    """Build a NamedNode from any of the three supported call shapes.

    ``iri("https://triply.cc/abc")``, ``iri(t, "abc")`` and ``iri("t", "abc")``
    all give ``URIRef("https://triply.cc/abc")`` when ``t`` is bound to
    ``https://triply.cc/``.
    """
    if local is None:
        if not isinstance(value, str):
            raise TypeError("iri() with a namespace binding requires a local name")
        return iri_from_string(value)
    if isinstance(value, NamespaceBinding):
        return iri_from_namespace(value, local)
    return iri_from_alias(value, local, registry)


# ── Literals ───────────────────────────────────────────────────

def literal_string(lexical: str) -> Literal:
    return Literal(lexical, datatype=XSD.string)


def literal_typed(lexical: str, datatype: URIRef) -> Literal:
    return Literal(lexical, datatype=datatype)


def literal_lang(lexical: str, language: str) -> Literal:
    return Literal(lexical, lang=language)


def literal(lexical: str, qualifier: URIRef | str | None = None) -> Literal:
    """Build a Literal, dispatching on the shape of ``qualifier``.

    A URIRef qualifier is a datatype; a plain string is a language tag.
    There is no way to pass a datatype as a bare string: ``literal(x,
    "http://www.w3.org/2001/XMLSchema#date")`` is read as a language tag
    (and rdflib rejects it as malformed).
    """
    if qualifier is None:
        return literal_string(lexical)
    if isinstance(qualifier, URIRef):
        return literal_typed(lexical, qualifier)
    return literal_lang(lexical, qualifier)
