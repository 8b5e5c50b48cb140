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

"""Namespace registry — alias → base IRI bindings.

A binding turns a local name into a full IRI by plain concatenation.
No escaping, normalization or trailing-slash correction happens here:
``dct("title")`` is exactly ``URIRef("http://purl.org/dc/terms/" + "title")``.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from rdflib import URIRef


class UnknownPrefixError(KeyError):
    """Raised when an alias has no binding in the registry."""


@dataclass(frozen=True, slots=True)
class NamespaceBinding:
    """Immutable alias bound to a base IRI; callable as ``local → URIRef``."""

    alias: str
    base: str

    def __call__(self, local: str) -> URIRef:
        return URIRef(self.base + local)


class NamespaceRegistry(Mapping[str, NamespaceBinding]):
    """Read-only alias table. Safe to share across records."""

    __slots__ = ("_bindings",)

    def __init__(self, bases: Mapping[str, str]) -> None:
        self._bindings = MappingProxyType(
            {alias: NamespaceBinding(alias, base) for alias, base in bases.items()}
        )

    def __getitem__(self, alias: str) -> NamespaceBinding:
        return self.resolve(alias)

    def __iter__(self) -> Iterator[str]:
        return iter(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)

    def resolve(self, alias: str) -> NamespaceBinding:
        try:
            return self._bindings[alias]
        except KeyError:
            raise UnknownPrefixError(f"Unknown namespace alias: {alias!r}") from None

    def extend(self, bases: Mapping[str, str]) -> NamespaceRegistry:
        """Return a new registry with extra (or overriding) bindings."""
        merged = {alias: b.base for alias, b in self._bindings.items()}
        merged.update(bases)
        return NamespaceRegistry(merged)


# ── Default prefix table ──────────────────────────────────────

PREFIXES: Mapping[str, str] = MappingProxyType({
    "aat": "http://vocab.getty.edu/aat/",
    "adms_assetType": "http://purl.org/adms/assettype/",
    "adms_status": "http://purl.org/adms/status/",
    "bibo": "http://purl.org/ontology/bibo/",
    "bibo_status": "http://purl.org/ontology/bibo/status/",
    "con": "http://www.w3.org/2000/10/swap/pim/contact#",
    "dbo": "http://dbpedia.org/ontology/",
    "dbr": "http://dbpedia.org/resource/",
    "dc": "http://purl.org/dc/elements/1.1/",
    "dcat": "http://www.w3.org/ns/dcat#",
    "dcm": "http://purl.org/dc/dcmitype/",
    "dct": "http://purl.org/dc/terms/",
    "deo": "http://purl.org/spar/deo/",
    "doco": "http://purl.org/spar/doco/",
    "edm": "http://www.europeana.eu/schemas/edm/",
    "fabio": "http://purl.org/spar/fabio/",
    "foaf": "http://xmlns.com/foaf/0.1/",
    "format": "http://www.w3.org/ns/formats/",
    "frbr": "http://purl.org/vocab/frbr/core#",
    "geo": "http://www.opengis.net/ont/geosparql#",
    "orb": "http://purl.org/orb/1.0/",
    "ore": "http://www.openarchives.org/ore/terms/",
    "org": "http://www.w3.org/ns/org#",
    "owl": "http://www.w3.org/2002/07/owl#",
    "pnv": "https://w3id.org/pnv#",
    "po": "http://www.essepuntato.it/2008/12/pattern#",
    "qb": "http://purl.org/linked-data/cube#",
    "rdf": "http://www.w3.org/1999/02/22-rdf-syntax-ns#",
    "rdfs": "http://www.w3.org/2000/01/rdf-schema#",
    "sdo": "https://schema.org/",
    "sh": "http://www.w3.org/ns/shacl#",
    "skos": "http://www.w3.org/2004/02/skos/core#",
    "ssd": "http://www.w3.org/ns/sparql-service-description#",
    "swap": "http://www.w3.org/2000/10/swap/pim/doc#",
    "time": "http://www.w3.org/2006/time#",
    "topic": "https://triplydb.com/Triply/topics/id/",
    "vann": "http://purl.org/vocab/vann/",
    "vs": "http://www.w3.org/2003/06/sw-vocab-status/ns#",
    "wgs84": "http://www.w3.org/2003/01/geo/wgs84_pos#",
    "xsd": "http://www.w3.org/2001/XMLSchema#",
})

DEFAULT_REGISTRY = NamespaceRegistry(PREFIXES)
