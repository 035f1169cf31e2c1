"""SQLAlchemy where compiler.

Transforms `SearchCriteria` into SQLAlchemy boolean clauses against a mapped
model whose column types are known from the mapping.

Path navigation:
- By default every relationship hop in ``customer.address.city`` is wrapped
  in ``has()`` (scalar) or ``any()`` (collection), so the clause needs no joins.
- A caller-supplied ``path_factory(prefix)`` may instead return the entity
  (mapped class or alias) that owns the terminal column; the caller is then
  responsible for joining it. `relationship_path` builds such a factory.

Comparison semantics:
- EQ / NE compare against the inferred value (lists are passed through).
- GT / GE / LT / LE compare against the text form of the inferred value, so
  every ordering compiles whatever the column type is, at the cost of
  lexicographic ordering on non-text columns.
- EXISTS renders IS NOT NULL / IS NULL.
"""

from __future__ import annotations

import operator
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import ColumnElement, and_
from sqlalchemy.orm import RelationshipProperty

from ...constants import SearchOperator
from ...exceptions import InvalidFieldError
from ...logger import get_logger
from ...schema import SearchCriteria
from ...types import PathFactory, PathPrefix
from ..inference import ValueInferencer
from ..paths import resolve_path
from .base import BaseWhere

__all__ = (
    "SQLAlchemyWhereCompiler",
    "relationship_path",
)

logger = get_logger(__name__)

_ORDERING = frozenset({SearchOperator.GT, SearchOperator.GE, SearchOperator.LT, SearchOperator.LE})


def _get_relationship(entity: Any, name: str, key: str) -> Any:
    attr = getattr(entity, name, None)
    prop = getattr(attr, "property", None)
    if not isinstance(prop, RelationshipProperty):
        raise InvalidFieldError(
            "Path segment is not a relationship",
            model=getattr(entity, "__name__", repr(entity)),
            relationship=name,
            key=key,
        )
    return attr


def relationship_path(model: type[Any]) -> PathFactory:
    """Build a path factory that walks relationships starting at ``model``.

    The factory returns the mapped class at the end of the chain. It does not
    join anything: the statement using the compiled clause must join the same
    relationships.

    Example:
        stmt = select(Order).join(Order.customer)
        clause = compiler.compile(criteria, path_factory=relationship_path(Order))
    """

    def factory(prefix: PathPrefix) -> Any:
        entity = model
        for name in prefix:
            entity = _get_relationship(entity, name, ".".join(prefix)).property.mapper.class_
        return entity

    return factory


class SQLAlchemyWhereCompiler(BaseWhere):
    """Compile search criteria into SQLAlchemy clauses for one mapped model.

    Args:
        model: Mapped class the criteria paths start from
        inferencer: Value inferencer; defaults to the configured separators
    """

    _OP_MAP: Dict[SearchOperator, Callable[[Any, Any], Any]] = {
        SearchOperator.EQ: operator.eq,
        SearchOperator.NE: operator.ne,
        SearchOperator.GT: operator.gt,
        SearchOperator.GE: operator.ge,
        SearchOperator.LT: operator.lt,
        SearchOperator.LE: operator.le,
    }

    def __init__(self, model: type[Any], inferencer: Optional[ValueInferencer] = None) -> None:
        self.model = model
        self.inferencer = inferencer or ValueInferencer.from_settings()

    def compile(
        self,
        criteria: SearchCriteria,
        path_factory: Optional[PathFactory] = None,
        **kwargs: Any,
    ) -> Optional[ColumnElement[bool]]:
        """Convert one criterion into a SQLAlchemy boolean clause.

        Args:
            criteria: Criterion to compile
            path_factory: Optional navigation returning the entity that owns
                the terminal column for a relationship prefix

        Returns:
            The clause, or None for the UNKNOWN operator

        Raises:
            InvalidFieldError: If the path is blank or names a missing attribute
            UnsupportedOperatorError: If the operator is outside the known set
        """
        op = criteria.op
        if op == SearchOperator.UNKNOWN:
            return self._skip(criteria)
        if op != SearchOperator.EXISTS and op not in self._OP_MAP:
            raise self._unsupported(criteria)

        prefix, field_name = resolve_path(criteria.key)
        self._require_field(criteria, field_name)
        build = self._builder(criteria)

        if path_factory is not None:
            predicate = build(self._column(path_factory(prefix), field_name, criteria.key))
        else:
            predicate = self._navigate(self.model, prefix, field_name, build, criteria.key)

        logger.compiled(self, criteria, predicate)
        return predicate

    def combine(self, predicates: List[Any]) -> Optional[ColumnElement[bool]]:
        if not predicates:
            return None
        if len(predicates) == 1:
            return predicates[0]
        return and_(*predicates)

    def to_expr(self, predicate: Any) -> str:
        return str(predicate)

    def _builder(self, criteria: SearchCriteria) -> Callable[[Any], Any]:
        """Return a function applying the criterion to the terminal column."""
        if criteria.op == SearchOperator.EXISTS:
            if criteria.exists:
                return lambda column: column.is_not(None)
            return lambda column: column.is_(None)

        value = self.inferencer.infer(criteria.value)
        if criteria.op in _ORDERING:
            value = self.inferencer.format_value(value)
        compare = self._OP_MAP[criteria.op]
        return lambda column: compare(column, value)

    def _navigate(
        self,
        entity: Any,
        prefix: PathPrefix,
        field_name: str,
        build: Callable[[Any], Any],
        key: str,
    ) -> Any:
        """Wrap the terminal predicate in has()/any() for each relationship hop."""
        if not prefix:
            return build(self._column(entity, field_name, key))
        relationship = _get_relationship(entity, prefix[0], key)
        target = relationship.property.mapper.class_
        inner = self._navigate(target, prefix[1:], field_name, build, key)
        if relationship.property.uselist:
            return relationship.any(inner)
        return relationship.has(inner)

    @staticmethod
    def _column(entity: Any, field_name: str, key: str) -> Any:
        column = getattr(entity, field_name, None)
        if column is None:
            raise InvalidFieldError(
                "Model has no such attribute",
                model=getattr(entity, "__name__", repr(entity)),
                field=field_name,
                key=key,
            )
        return column
