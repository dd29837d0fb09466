"""Query evaluation against a single document.

A query is a mapping from field name to either a literal (implicit
``$eq``) or an operator mapping such as ``{"$gt": 3}``. All top-level
field clauses are AND-ed. The reserved ``$or`` key holds a list of
clauses, each a field/operator mapping of its own; the group matches when
any clause matches::

    {"size": 27}                                      # literal
    {"size": {"$gt": 20, "$lt": 30}}                  # operators AND-ed
    {"$or": [{"size": {"$eq": 27}}, {"size": 32}]}    # OR-group

Operators:

    Operator | Matches when
    ---------|-------------------------------------------------------------
    $eq      | value deeply equals operand
    $ne      | value does not deeply equal operand
    $gt/$lt  | both numbers or both text, and ordered accordingly
    $in      | operand list contains value, or operand text contains value
    $regex   | operand is a compiled pattern that finds a match in value

Operand/value type mismatches never raise; the clause simply does not
match. Malformed queries raise ``InvalidArgumentError``.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Callable

from docstore.ports.inbound.errors import InvalidArgumentError


OR_KEY = "$or"


class _Missing:
    """Marker for a field absent from a document (distinct from None)."""

    def __repr__(self) -> str:
        return "<missing>"


MISSING: Any = _Missing()


def deep_equal(left: Any, right: Any) -> bool:
    """Structural equality that keeps booleans apart from numbers."""
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        if left.keys() != right.keys():
            return False
        return all(deep_equal(left[key], right[key]) for key in left)
    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        if len(left) != len(right):
            return False
        return all(deep_equal(a, b) for a, b in zip(left, right))
    if isinstance(left, (Mapping, list, tuple)) or isinstance(right, (Mapping, list, tuple)):
        return False
    return left == right


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _comparable(value: Any, operand: Any) -> bool:
    return (_is_number(value) and _is_number(operand)) or (
        isinstance(value, str) and isinstance(operand, str)
    )


def op_eq(value: Any, operand: Any) -> bool:
    return value is not MISSING and deep_equal(value, operand)


def op_ne(value: Any, operand: Any) -> bool:
    return not op_eq(value, operand)


def op_gt(value: Any, operand: Any) -> bool:
    return _comparable(value, operand) and value > operand


def op_lt(value: Any, operand: Any) -> bool:
    return _comparable(value, operand) and value < operand


def op_in(value: Any, operand: Any) -> bool:
    if isinstance(operand, str):
        return isinstance(value, str) and value in operand
    if isinstance(operand, (list, tuple)):
        return value is not MISSING and any(deep_equal(value, item) for item in operand)
    return False


def op_regex(value: Any, operand: Any) -> bool:
    if not isinstance(operand, re.Pattern) or not isinstance(value, str):
        return False
    return operand.search(value) is not None


OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "$eq": op_eq,
    "$ne": op_ne,
    "$gt": op_gt,
    "$lt": op_lt,
    "$in": op_in,
    "$regex": op_regex,
}


def is_operator_mapping(condition: Any) -> bool:
    """Return True if condition is ``{"$op": operand, ...}`` rather than a literal."""
    return (
        isinstance(condition, Mapping)
        and len(condition) > 0
        and all(isinstance(key, str) and key.startswith("$") for key in condition)
    )


def _or_clauses(operand: Any) -> list[Mapping[str, Any]]:
    """Normalize an ``$or`` operand into a list of clauses.

    The mapping form ``{"$or": {"a": 1, "b": 2}}`` is expanded into one
    clause per field.
    """
    if isinstance(operand, Mapping):
        return [{field: condition} for field, condition in operand.items()]
    if isinstance(operand, (list, tuple)):
        for clause in operand:
            if not isinstance(clause, Mapping):
                raise InvalidArgumentError(
                    f"$or clauses must be mappings, got {type(clause).__name__}"
                )
        return list(operand)
    raise InvalidArgumentError(
        f"$or expects a list of clauses, got {type(operand).__name__}"
    )


def _validate_clause(clause: Mapping[str, Any], allow_or: bool) -> None:
    for field, condition in clause.items():
        if not isinstance(field, str):
            raise InvalidArgumentError(f"Query fields must be text, got {field!r}")
        if field == OR_KEY:
            if not allow_or:
                raise InvalidArgumentError("$or cannot be nested inside an $or clause")
            for sub_clause in _or_clauses(condition):
                _validate_clause(sub_clause, allow_or=False)
            continue
        if field.startswith("$"):
            raise InvalidArgumentError(f"Unknown top-level query operator: {field}")
        if is_operator_mapping(condition):
            for op in condition:
                if op not in OPERATORS:
                    raise InvalidArgumentError(f"Unknown query operator: {op}")


def validate_query(query: Any) -> None:
    """Check a query's shape without evaluating it.

    Raises:
        InvalidArgumentError: If the query is not a mapping, uses an
            unknown operator, or has a malformed ``$or`` group.
    """
    if not isinstance(query, Mapping):
        raise InvalidArgumentError(
            f"Query must be a mapping, got {type(query).__name__}"
        )
    _validate_clause(query, allow_or=True)


def _matches_field(document: Mapping[str, Any], field: str, condition: Any) -> bool:
    value = document.get(field, MISSING)
    if is_operator_mapping(condition):
        for op, operand in condition.items():
            operator = OPERATORS.get(op)
            if operator is None:
                raise InvalidArgumentError(f"Unknown query operator: {op}")
            if not operator(value, operand):
                return False
        return True
    return op_eq(value, condition)


def _matches_clause(document: Mapping[str, Any], clause: Mapping[str, Any]) -> bool:
    for field, condition in clause.items():
        if field == OR_KEY:
            continue
        if not _matches_field(document, field, condition):
            return False
    return True


def matches(document: Mapping[str, Any], query: Mapping[str, Any]) -> bool:
    """Return True if document satisfies query.

    The document must satisfy every top-level field clause and, when an
    ``$or`` group is present, at least one of its clauses.

    Raises:
        InvalidArgumentError: If query is not a mapping or names an
            unknown operator.
    """
    if not isinstance(query, Mapping):
        raise InvalidArgumentError(
            f"Query must be a mapping, got {type(query).__name__}"
        )
    if not _matches_clause(document, query):
        return False
    if OR_KEY in query:
        return any(
            _matches_clause(document, clause) for clause in _or_clauses(query[OR_KEY])
        )
    return True
