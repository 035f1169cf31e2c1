"""Base compiler interface.

Defines the abstract contract all backend-specific where compilers must follow.
"""

from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Optional

from ...exceptions import InvalidFieldError, UnsupportedOperatorError
from ...logger import get_logger
from ...schema import SearchCriteria

__all__ = ("BaseWhere",)

logger = get_logger(__name__)


class BaseWhere(ABC):
    """Abstract base class for where clause compilers.

    Subclasses implement `compile` (one criterion -> one predicate) and
    `combine` (predicates -> conjunction) for a single backend. A deployment
    wires exactly one compiler; the choice never changes at runtime.
    """

    @abstractmethod
    def compile(self, criteria: SearchCriteria, **kwargs: Any) -> Optional[Any]:
        """Convert one criterion into a backend-native predicate.

        Returns None for the UNKNOWN operator, which callers treat as
        "no constraint".
        """
        raise NotImplementedError

    @abstractmethod
    def combine(self, predicates: List[Any]) -> Any:
        """AND a list of compiled predicates together."""
        raise NotImplementedError

    @abstractmethod
    def to_expr(self, predicate: Any) -> str:
        """Render a compiled predicate as a string for logging and debugging."""
        raise NotImplementedError

    def to_where(self, criteria: Iterable[SearchCriteria], **kwargs: Any) -> Any:
        """Compile every criterion and AND the resulting predicates.

        Criteria that compile to no predicate are skipped.
        """
        predicates = []
        for item in criteria:
            predicate = self.compile(item, **kwargs)
            if predicate is not None:
                predicates.append(predicate)
        return self.combine(predicates)

    def _skip(self, criteria: SearchCriteria) -> None:
        logger.skipped(self, criteria)
        return None

    def _unsupported(self, criteria: SearchCriteria) -> UnsupportedOperatorError:
        return UnsupportedOperatorError(
            f"Operator {criteria.op!r} is not supported",
            key=criteria.key,
            compiler=type(self).__name__,
        )

    def _require_field(self, criteria: SearchCriteria, field_name: str) -> None:
        if not field_name:
            raise InvalidFieldError(
                "A field path is required for this operator",
                key=criteria.key,
                op=getattr(criteria.op, "value", criteria.op),
            )
