"""MongoDB where compiler.

Transforms `SearchCriteria` into MongoDB filter documents for collections
whose field types are not known up front.

A schema-less store may hold ``"123"`` in one document and ``123`` in
another, so ambiguous comparisons are hedged: the criterion's declared value
type selects a typed interpretation that is OR-ed with the plain string one.

- Declared NUMBER / BOOLEAN: ``{"$or": [string_condition, typed_condition]}``
  for EQ, NE, GT, GE, LT and LE. The typed branch is omitted when the value
  does not coerce.
- No declared type: EQ / NE match a ``/pattern/options`` literal as a regular
  expression, anything else as the unescaped text. Ordering operators compare
  the raw text unhedged.
- Array criteria: EQ / NE become ``$in`` / ``$nin`` over the comma-separated
  values, hedged the same way when a type is declared.
- EXISTS renders ``$exists``.
"""

import re
from typing import Any, Callable, Dict, List, Optional

from bson.regex import Regex

from ...constants import REGEX_PATTERN, REGEX_WITH_OPTIONS_PATTERN, SearchOperator, ValueType
from ...logger import get_logger
from ...schema import SearchCriteria
from ..inference import ValueInferencer, parse_boolean, split_values, unescape
from .base import BaseWhere

__all__ = (
    "MongoWhereCompiler",
    "mongodb_where",
    "parse_regex",
)

logger = get_logger(__name__)

_REGEX_WITH_OPTIONS_RE = re.compile(REGEX_WITH_OPTIONS_PATTERN)
_REGEX_RE = re.compile(REGEX_PATTERN)


def parse_regex(text: Optional[str]) -> Optional[Regex]:
    """Read ``/pattern/options`` or ``/pattern`` as a BSON regular expression.

    Options are drawn from ``gimscxdtu``; those without a Python flag are
    ignored by `bson.regex.Regex`.
    """
    if text is None:
        return None
    match = _REGEX_WITH_OPTIONS_RE.fullmatch(text)
    if match:
        return Regex(match.group(1), match.group(2))
    match = _REGEX_RE.fullmatch(text)
    if match:
        return Regex(match.group(1))
    return None


class MongoWhereCompiler(BaseWhere):
    """Compile search criteria into MongoDB filter dicts.

    Args:
        inferencer: Value inferencer; defaults to the configured separators
    """

    _OP_MAP = {
        SearchOperator.EQ: "$eq",
        SearchOperator.NE: "$ne",
        SearchOperator.GT: "$gt",
        SearchOperator.GE: "$gte",
        SearchOperator.LT: "$lt",
        SearchOperator.LE: "$lte",
    }

    _ARRAY_OP_MAP = {
        SearchOperator.EQ: "$in",
        SearchOperator.NE: "$nin",
    }

    def __init__(self, inferencer: Optional[ValueInferencer] = None) -> None:
        self.inferencer = inferencer or ValueInferencer.from_settings()
        self._coercers: Dict[ValueType, Callable[[str], Any]] = {
            ValueType.NUMBER: self.inferencer.parse_number,
            ValueType.BOOLEAN: parse_boolean,
        }

    def compile(self, criteria: SearchCriteria, **kwargs: Any) -> Optional[Dict[str, Any]]:
        """Convert one criterion into a MongoDB filter dict.

        Returns:
            The filter, or None for the UNKNOWN operator

        Raises:
            InvalidFieldError: If the key is blank
            UnsupportedOperatorError: If the operator is outside the known set
        """
        op = criteria.op
        if op == SearchOperator.UNKNOWN:
            return self._skip(criteria)
        if op != SearchOperator.EXISTS and op not in self._OP_MAP:
            raise self._unsupported(criteria)
        self._require_field(criteria, criteria.key.strip())

        if op == SearchOperator.EXISTS:
            predicate = {criteria.key: {"$exists": criteria.exists}}
        elif criteria.array and op in self._ARRAY_OP_MAP:
            predicate = self._membership(criteria)
        elif criteria.type is not None:
            predicate = self._hedged(criteria)
        elif op in self._ARRAY_OP_MAP:
            predicate = self._literal(criteria)
        else:
            predicate = self._condition(criteria.key, op, criteria.value)

        logger.compiled(self, criteria, predicate)
        return predicate

    def combine(self, predicates: List[Any]) -> Dict[str, Any]:
        if not predicates:
            return {}
        if len(predicates) == 1:
            return predicates[0]
        return {"$and": predicates}

    def to_expr(self, predicate: Any) -> str:
        return str(predicate)

    def _condition(self, key: str, op: SearchOperator, value: Any) -> Dict[str, Any]:
        return {key: {self._OP_MAP[op]: value}}

    @staticmethod
    def _hedge(string_predicate: Dict[str, Any], typed_predicate: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        if typed_predicate is None:
            return string_predicate
        return {"$or": [string_predicate, typed_predicate]}

    def _literal(self, criteria: SearchCriteria) -> Dict[str, Any]:
        regex = parse_regex(criteria.value)
        if regex is not None:
            if criteria.op == SearchOperator.NE:
                return {criteria.key: {"$not": regex}}
            return {criteria.key: {"$regex": regex}}
        value = None if criteria.value is None else unescape(criteria.value)
        return self._condition(criteria.key, criteria.op, value)

    def _hedged(self, criteria: SearchCriteria) -> Dict[str, Any]:
        coerce = self._coercers[criteria.type]
        string_predicate = self._condition(criteria.key, criteria.op, criteria.value)
        typed_value = coerce(criteria.value)
        typed_predicate = None
        if typed_value is not None:
            typed_predicate = self._condition(criteria.key, criteria.op, typed_value)
        return self._hedge(string_predicate, typed_predicate)

    def _membership(self, criteria: SearchCriteria) -> Dict[str, Any]:
        mongo_op = self._ARRAY_OP_MAP[criteria.op]
        values = [unescape(part) for part in split_values(criteria.value or "")]
        string_predicate = {criteria.key: {mongo_op: values}}
        if criteria.type is None:
            return string_predicate

        coerce = self._coercers[criteria.type]
        # Values that do not coerce stay covered by the string branch
        typed_values = [typed for typed in (coerce(value) for value in values) if typed is not None]
        typed_predicate = {criteria.key: {mongo_op: typed_values}} if typed_values else None
        return self._hedge(string_predicate, typed_predicate)


mongodb_where = MongoWhereCompiler()
