from typing import Any, Optional

from ...exceptions import InvalidConfigError
from ...logger import get_logger
from ...settings import settings as api_settings
from .base import BaseWhere
from .document import MongoWhereCompiler, mongodb_where, parse_regex
from .relational import SQLAlchemyWhereCompiler, relationship_path

logger = get_logger(__name__)

__all__ = (
    "BaseWhere",
    "MongoWhereCompiler",
    "mongodb_where",
    "parse_regex",
    "SQLAlchemyWhereCompiler",
    "relationship_path",
    "get_where_compiler",
)


def get_where_compiler(backend: Optional[str] = None, model: Optional[type[Any]] = None) -> BaseWhere:
    """Return the where compiler wired for ``backend``.

    Args:
        backend: "sqlalchemy" or "mongodb"; defaults to SEARCH_BACKEND
        model: Mapped class the criteria apply to (required for "sqlalchemy")

    Raises:
        InvalidConfigError: If the backend is unknown or its requirements are missing
    """
    name = (backend or api_settings.SEARCH_BACKEND).lower()
    logger.message("Using %s where compiler", name)
    if name == "mongodb":
        return MongoWhereCompiler()
    if name == "sqlalchemy":
        if model is None:
            raise InvalidConfigError("A mapped model is required", config_key="SEARCH_BACKEND", value=name)
        return SQLAlchemyWhereCompiler(model)
    raise InvalidConfigError(
        "Unknown search backend",
        config_key="SEARCH_BACKEND",
        value=name,
        expected="sqlalchemy|mongodb",
    )
