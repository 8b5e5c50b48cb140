"""Tests for YAML workflow loading, step building and the CLI entry point."""

import textwrap

import pytest
from rdflib import Graph, Literal, URIRef
from rdflib.namespace import DCTERMS, RDF

import main
from edm_etl.config import EngineConfig, StepSpec, load_config
from edm_etl.namespaces import DEFAULT_REGISTRY, UnknownPrefixError
from edm_etl.pipeline import run_pipeline
from edm_etl.result import ErrorKind
from edm_etl.sparql.client import EndpointEngine
from edm_etl.sparql.engine import RdflibEngine
from edm_etl.workflow import build_engine, build_registry, build_steps, load_records, parse_term

WORKFLOW = """
namespaces:
  obj: https://data.example.org/id/object/
  country: https://data.example.org/id/country/
source:
  csv: objects.csv
engine:
  type: local
steps:
  - step: hashed_iri
    key: id
    prefix: obj
    fields: [title, creator]
  - step: split
    key: keywords
  - step: string_to_iri
    key: country
    table: {"NL": "country:NL"}
    nulls: ["", unknown]
  - step: triple
    subject: {field: id}
    predicate: rdf:type
    object: edm:ProvidedCHO
  - step: triple
    subject: {field: id}
    predicate: dct:title
    object: {field: title, language: nl}
  - step: triple
    subject: {field: id}
    predicate: dct:spatial
    object: {field: country}
  - step: sparql_select
    key: objects
    query: "SELECT ?o WHERE { ?o a <http://www.europeana.eu/schemas/edm/ProvidedCHO> }"
output:
  path: out/objects.nt
  format: nt
"""

CSV = textwrap.dedent("""\
    title,creator,country,keywords
    Gezicht op Delft,Vermeer,NL,"city, water"
    Schets,Anoniem,unknown,
""")


@pytest.fixture
def workflow(tmp_path):
    (tmp_path / "objects.csv").write_text(CSV, encoding="utf-8")
    path = tmp_path / "workflow.yaml"
    path.write_text(WORKFLOW, encoding="utf-8")
    return path


class TestLoadConfig:

    def test_loads_structure(self, workflow, tmp_path):
        result = load_config(workflow)
        assert result.ok
        config = result.data
        assert config.namespaces["obj"] == "https://data.example.org/id/object/"
        assert config.source.csv == (tmp_path / "objects.csv").resolve()
        assert config.engine.type == "local"
        assert [s.name for s in config.steps][:2] == ["hashed_iri", "split"]
        assert config.steps[1].params == {"key": "keywords"}
        assert config.output.format == "nt"
        assert config.fail_fast is False

    def test_missing_file(self, tmp_path):
        result = load_config(tmp_path / "nope.yaml")
        assert not result.ok
        assert result.kind == ErrorKind.CONFIG

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("steps: [unclosed", encoding="utf-8")
        result = load_config(path)
        assert not result.ok
        assert "YAML parse error" in result.error

    def test_missing_steps(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("source: {records: []}\n", encoding="utf-8")
        result = load_config(path)
        assert not result.ok
        assert "structure error" in result.error


class TestBuild:

    def test_parse_term(self):
        assert parse_term("dct:title", DEFAULT_REGISTRY) == DCTERMS.title
        assert parse_term("https://x.org/a", DEFAULT_REGISTRY) == URIRef("https://x.org/a")
        assert parse_term("urn:isbn:123", DEFAULT_REGISTRY) == URIRef("urn:isbn:123")
        with pytest.raises(UnknownPrefixError):
            parse_term("title", DEFAULT_REGISTRY)

    def test_engines(self):
        assert isinstance(build_engine(EngineConfig()).data, RdflibEngine)
        remote = build_engine(EngineConfig(type="endpoint", endpoint="https://q.example.org/sparql"))
        assert isinstance(remote.data, EndpointEngine)
        assert not build_engine(EngineConfig(type="endpoint")).ok
        assert not build_engine(EngineConfig(type="other")).ok

    def test_build_steps(self, workflow):
        config = load_config(workflow).data
        result = build_steps(config.steps, build_registry(config), RdflibEngine())
        assert result.ok
        assert [s.__name__ for s in result.data][:3] == [
            "hashed_iri(id)", "split(keywords)", "string_to_iri(country)",
        ]

    def test_unknown_step(self):
        result = build_steps([StepSpec(name="enrich", params={})], DEFAULT_REGISTRY, RdflibEngine())
        assert not result.ok
        assert result.kind == ErrorKind.CONFIG
        assert "enrich" in result.error

    def test_bad_params(self):
        specs = [StepSpec(name="hashed_iri", params={"key": "id", "prefix": "nope", "fields": []})]
        result = build_steps(specs, DEFAULT_REGISTRY, RdflibEngine())
        assert not result.ok
        assert result.kind == ErrorKind.CONFIG

    def test_empty_split_separator_is_config_error(self):
        specs = [StepSpec(name="split", params={"key": "keywords", "separator": ""})]
        result = build_steps(specs, DEFAULT_REGISTRY, RdflibEngine())
        assert not result.ok
        assert result.kind == ErrorKind.CONFIG
        assert "separator" in result.error

    def test_unknown_missing_policy_is_config_error(self):
        registry = DEFAULT_REGISTRY.extend({"obj": "https://data.example.org/id/object/"})
        specs = [StepSpec(name="hashed_iri", params={
            "key": "id", "prefix": "obj", "fields": ["title"], "missing": "empyt",
        })]
        result = build_steps(specs, registry, RdflibEngine())
        assert not result.ok
        assert result.kind == ErrorKind.CONFIG
        assert "empyt" in result.error

    def test_unquoted_yaml_codes_are_config_error(self, tmp_path):
        path = tmp_path / "codes.yaml"
        path.write_text(textwrap.dedent("""\
            namespaces:
              country: https://data.example.org/id/country/
            source: {records: []}
            steps:
              - step: string_to_iri
                key: country
                table: {NO: "country:NO", 1: "country:ONE"}
        """), encoding="utf-8")
        config = load_config(path).data
        assert False in config.steps[0].params["table"]
        result = build_steps(config.steps, build_registry(config), RdflibEngine())
        assert not result.ok
        assert result.kind == ErrorKind.CONFIG
        assert "quote it" in result.error

    def test_quoted_yaml_codes_map_literally(self, tmp_path):
        path = tmp_path / "codes.yaml"
        path.write_text(textwrap.dedent("""\
            namespaces:
              country: https://data.example.org/id/country/
            source:
              records:
                - {country: "NO"}
            steps:
              - step: string_to_iri
                key: country
                table: {"NO": "country:NO"}
        """), encoding="utf-8")
        config = load_config(path).data
        steps = build_steps(config.steps, build_registry(config), RdflibEngine()).data
        run = run_pipeline(steps, load_records(config.source).data).data
        assert not run.failures
        assert run.records[0]["country"] == URIRef("https://data.example.org/id/country/NO")

    def test_load_records(self, workflow):
        config = load_config(workflow).data
        records = load_records(config.source).data
        assert records[0]["keywords"] == "city, water"
        assert records[1]["country"] == "unknown"


class TestMain:

    def test_end_to_end(self, workflow, tmp_path):
        assert main.main(["--workflow", str(workflow)]) == 0
        graph = Graph().parse(tmp_path / "out" / "objects.nt", format="nt")
        subjects = set(graph.subjects(RDF.type, URIRef("http://www.europeana.eu/schemas/edm/ProvidedCHO")))
        assert len(subjects) == 2
        assert all(str(s).startswith("https://data.example.org/id/object/") for s in subjects)
        assert (None, DCTERMS.title, Literal("Schets", lang="nl")) in graph
        assert len(list(graph.triples((None, DCTERMS.spatial, None)))) == 1

    def test_output_override(self, workflow, tmp_path):
        target = tmp_path / "other.nt"
        assert main.main(["--workflow", str(workflow), "--output", str(target)]) == 0
        assert target.exists()

    def test_record_failure_sets_exit_code(self, workflow, tmp_path):
        (tmp_path / "objects.csv").write_text(CSV + "Onbekend,X,XX,\n", encoding="utf-8")
        assert main.main(["--workflow", str(workflow)]) == 1

    def test_missing_workflow(self, tmp_path):
        assert main.main(["--workflow", str(tmp_path / "missing.yaml")]) == 1
