"""
Pytest configuration and shared fixtures.

Fixtures:
    registry    — default prefixes plus ``t`` → https://triply.cc/
    store       — small rdflib graph with two objects
    make_ctx    — StepContext factory over ``store``
"""

import os
import sys

import pytest
from rdflib import Graph, Literal, URIRef
from rdflib.namespace import DCTERMS, RDF

# Add project root to path for imports
root_dir = os.path.join(os.path.dirname(__file__), "..")
if root_dir not in sys.path:
    sys.path.insert(0, root_dir)

from edm_etl.context import StepContext
from edm_etl.namespaces import DEFAULT_REGISTRY

EX = "https://example.org/"


@pytest.fixture
def registry():
    return DEFAULT_REGISTRY.extend({"t": "https://triply.cc/", "country": EX + "country/"})


@pytest.fixture
def store():
    g = Graph()
    for name, title in (("a", "Alpha"), ("b", "Beta")):
        s = URIRef(EX + name)
        g.add((s, RDF.type, URIRef(EX + "Thing")))
        g.add((s, DCTERMS.title, Literal(title)))
    return g


@pytest.fixture
def make_ctx(store):
    def _make(**fields):
        return StepContext(record=dict(fields), store=store)
    return _make
