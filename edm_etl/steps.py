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

"""Record-transforming pipeline steps.

Each factory returns a Step: ``StepContext → Result[Record]``.
Steps read and overwrite fields of ``ctx.record`` and return it wrapped
in Ok, or return a Fail describing why the record cannot continue.

  hashed_iri     — mint a content-derived IRI from selected fields
  split          — delimited string field → list of trimmed parts
  string_to_iri  — coded value → IRI via lookup table, or cleared
  triple         — emit triples into the shared graph store
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Collection, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Literal

from rdflib import URIRef
from rdflib.term import Identifier

from edm_etl.context import Record, Step, StepContext, get_field, named
from edm_etl.logger import get_logger
from edm_etl.namespaces import NamespaceBinding
from edm_etl.result import ErrorKind, Fail, Ok, Result
from edm_etl.terms import literal_lang, literal_string, literal_typed

log = get_logger(__name__)

MissingPolicy = Literal["fail", "empty"]
_MISSING_POLICIES = ("fail", "empty")


def _check_missing_policy(missing: str) -> None:
    if missing not in _MISSING_POLICIES:
        raise ValueError(
            f"missing must be one of {', '.join(_MISSING_POLICIES)}, got {missing!r}"
        )


# ── Hashed identifiers ────────────────────────────────────────

def _textual(value: Any) -> Any:
    """Stable text form of a field value for hashing."""
    if isinstance(value, Identifier):
        return value.n3()
    if isinstance(value, (list, tuple)):
        return [_textual(v) for v in value]
    return str(value)


def _digest(values: Sequence[Any]) -> str:
    # JSON quoting keeps ("ab", "c") and ("a", "bc") apart.
    payload = json.dumps(values, ensure_ascii=False, separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def mint_hashed_iri(
    prefix: NamespaceBinding,
    record: Record,
    fields: Sequence[str],
    missing: MissingPolicy = "fail",
) -> Result[URIRef]:
    """Mint ``prefix(sha256(fields...))`` from the record's current values.

    Field order is part of the identity scheme: ``["a", "b"]`` and
    ``["b", "a"]`` mint different IRIs for the same record.
    With ``missing="fail"`` an absent or cleared field fails the record;
    with ``missing="empty"`` it hashes as the empty string.
    """
    _check_missing_policy(missing)
    values: list[Any] = []
    for key in fields:
        value = record.get(key)
        if value is None:
            if missing == "fail":
                return Fail(
                    error=f"Cannot mint hashed IRI: field '{key}' is missing",
                    context=list(fields),
                    kind=ErrorKind.MISSING_FIELD,
                )
            value = ""
        values.append(_textual(value))
    return Ok(data=prefix(_digest(values)))


def hashed_iri(
    key: str,
    prefix: NamespaceBinding,
    fields: Sequence[str],
    missing: MissingPolicy = "fail",
) -> Step:
    """Store a hashed IRI minted from ``fields`` under ``key``."""
    _check_missing_policy(missing)
    fields = tuple(fields)

    @named(f"hashed_iri({key})")
    def _hashed_iri(ctx: StepContext) -> Result[Record]:
        minted = mint_hashed_iri(prefix, ctx.record, fields, missing)
        if not minted.ok:
            return minted
        log.debug("Minted %s for fields %s", minted.data, ", ".join(fields))
        ctx.record[key] = minted.data
        return Ok(data=ctx.record)

    return _hashed_iri


# ── Field splitting ───────────────────────────────────────────

def split_value(value: str, separator: str = ",") -> list[str]:
    """Split, trim and drop empty parts. ``""`` gives ``[]``."""
    return [part.strip() for part in value.split(separator) if part.strip()]


def split(key: str, separator: str = ",") -> Step:
    """Replace a delimited string field with the list of its parts."""
    if not separator:
        raise ValueError("split separator must not be empty")

    @named(f"split({key})")
    def _split(ctx: StepContext) -> Result[Record]:
        field_result = get_field(ctx.record, key)
        if not field_result.ok:
            return field_result
        value = field_result.data
        if not isinstance(value, str):
            return Fail(
                error=f"Cannot split field '{key}': expected a string, got {type(value).__name__}",
                context=value,
                kind=ErrorKind.INVALID_VALUE,
            )
        ctx.record[key] = split_value(value, separator)
        return Ok(data=ctx.record)

    return _split


# ── Code → IRI mapping ────────────────────────────────────────

def string_to_iri(
    key: str,
    table: Mapping[str, URIRef],
    nulls: Collection[str] = (),
) -> Step:
    """Substitute a coded field value with its IRI from ``table``.

    Values listed in ``nulls`` clear the field to None. Any other value
    without a table entry fails the record with a lookup miss.
    """
    nulls = frozenset(nulls)

    @named(f"string_to_iri({key})")
    def _string_to_iri(ctx: StepContext) -> Result[Record]:
        field_result = get_field(ctx.record, key)
        if not field_result.ok:
            return field_result
        value = field_result.data
        if not isinstance(value, str):
            return Fail(
                error=f"Cannot map field '{key}': expected a string code, got {type(value).__name__}",
                context=value,
                kind=ErrorKind.INVALID_VALUE,
            )
        if value in nulls:
            ctx.record[key] = None
            return Ok(data=ctx.record)
        if value not in table:
            return Fail(
                error=f"No IRI mapping for value {value!r} in field '{key}'",
                context={"field": key, "value": value},
                kind=ErrorKind.LOOKUP_MISS,
            )
        ctx.record[key] = table[value]
        return Ok(data=ctx.record)

    return _string_to_iri


# ── Triple emission ───────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class FieldRef:
    """Term read from a record field at step time.

    Strings become IRIs when ``as_iri`` is set (through ``namespace`` if
    given), otherwise literals with ``datatype`` or ``language``.
    Values that are already rdflib terms are used as-is.
    """

    key: str
    as_iri: bool = False
    namespace: NamespaceBinding | None = None
    datatype: URIRef | None = None
    language: str | None = None

    def to_term(self, value: Any) -> Identifier:
        if isinstance(value, Identifier):
            return value
        text = str(value)
        if self.as_iri:
            return self.namespace(text) if self.namespace else URIRef(text)
        if self.datatype is not None:
            return literal_typed(text, self.datatype)
        if self.language is not None:
            return literal_lang(text, self.language)
        return literal_string(text)


Position = Identifier | FieldRef


def _resolve(position: Position, record: Record) -> list[Identifier] | None:
    """Terms for one triple position; None when the field is absent or cleared."""
    if not isinstance(position, FieldRef):
        return [position]
    value = record.get(position.key)
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return [position.to_term(v) for v in value]
    return [position.to_term(value)]


def triple(subject: Position, predicate: Position, obj: Position) -> Step:
    """Add ``subject predicate obj`` to the store for the current record.

    A missing subject or predicate fails the record. A missing or cleared
    object emits nothing; a list-valued object emits one triple per item.
    """
    label = getattr(predicate, "key", None) or str(predicate)

    @named(f"triple({label})")
    def _triple(ctx: StepContext) -> Result[Record]:
        resolved: list[list[Identifier]] = []
        for name, position in (("subject", subject), ("predicate", predicate)):
            terms = _resolve(position, ctx.record)
            if terms is None:
                return get_field(ctx.record, position.key)  # type: ignore[union-attr,return-value]
            if len(terms) != 1:
                return Fail(
                    error=f"Triple {name} must be a single term, got {len(terms)}",
                    context=terms,
                    kind=ErrorKind.INVALID_VALUE,
                )
            resolved.append(terms)
        objects = _resolve(obj, ctx.record) or []
        s, p = resolved[0][0], resolved[1][0]
        for o in objects:
            ctx.store.add((s, p, o))
        return Ok(data=ctx.record)

    return _triple


def chain(*groups: Step | Iterable[Step]) -> list[Step]:
    """Flatten single steps and step lists into one ordered step list."""
    steps: list[Step] = []
    for group in groups:
        if callable(group):
            steps.append(group)
        else:
            steps.extend(group)
    return steps
