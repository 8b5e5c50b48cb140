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

"""Loads a workflow YAML definition into typed dataclasses.

Pure loader — no step construction here. Step parameters stay as raw
mappings until edm_etl.workflow turns them into Step callables.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from edm_etl.result import ErrorKind, Fail, Ok, Result


# ── Source ─────────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class SourceConfig:
    """Either a CSV file or inline records."""
    csv: Path | None = None
    delimiter: str = ","
    records: list[dict[str, Any]] = field(default_factory=list)


# ── Engine ─────────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class EngineConfig:
    type: str = "local"
    endpoint: str | None = None
    timeout: int = 30


# ── Steps ──────────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class StepSpec:
    """One workflow step: factory name + its parameters."""
    name: str
    params: dict[str, Any]


# ── Output ─────────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class OutputConfig:
    path: Path | None = None
    format: str = "turtle"


# ── Top-level ──────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class WorkflowConfig:
    namespaces: dict[str, str]
    source: SourceConfig
    engine: EngineConfig
    steps: list[StepSpec]
    output: OutputConfig
    fail_fast: bool = False


# ── Loader ─────────────────────────────────────────────────────

def _resolve_path(value: str | None, base_dir: Path) -> Path | None:
    if not value:
        return None
    path = Path(value)
    return path if path.is_absolute() else (base_dir / path).resolve()


def _build_steps(raw_steps: list[dict[str, Any]]) -> list[StepSpec]:
    return [
        StepSpec(
            name=s["step"],
            params={k: v for k, v in s.items() if k != "step"},
        )
        for s in raw_steps
    ]


def _build_source(raw: dict[str, Any], base_dir: Path) -> SourceConfig:
    return SourceConfig(
        csv=_resolve_path(raw.get("csv"), base_dir),
        delimiter=raw.get("delimiter", ","),
        records=list(raw.get("records", [])),
    )


def load_config(path: Path) -> Result[WorkflowConfig]:
    """Load a workflow YAML into WorkflowConfig. No validation beyond structure."""
    if not path.exists():
        return Fail(error=f"Workflow file not found: {path}", kind=ErrorKind.CONFIG)

    try:
        raw: dict[str, Any] = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        return Fail(error=f"YAML parse error: {exc}", context=str(path), kind=ErrorKind.CONFIG)

    base_dir = path.resolve().parent

    try:
        engine = raw.get("engine", {})
        output = raw.get("output", {})

        config = WorkflowConfig(
            namespaces={str(k): str(v) for k, v in raw.get("namespaces", {}).items()},
            source=_build_source(raw["source"], base_dir),
            engine=EngineConfig(
                type=engine.get("type", "local"),
                endpoint=engine.get("endpoint"),
                timeout=engine.get("timeout", 30),
            ),
            steps=_build_steps(raw["steps"]),
            output=OutputConfig(
                path=_resolve_path(output.get("path"), base_dir),
                format=output.get("format", "turtle"),
            ),
            fail_fast=bool(raw.get("fail_fast", False)),
        )
    except (KeyError, TypeError, AttributeError) as exc:
        return Fail(error=f"Workflow structure error: {exc}", context=str(path), kind=ErrorKind.CONFIG)

    return Ok(data=config)
