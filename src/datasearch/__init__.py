"""
datasearch compiles flat search criteria into SQLAlchemy clauses or MongoDB
filter documents, inferring the type of each raw text value on the way.
"""

from .constants import SearchOperator, ValueType
from .querydsl.compilers import (
    MongoWhereCompiler,
    SQLAlchemyWhereCompiler,
    get_where_compiler,
)
from .schema import SearchCriteria

__version__ = "0.1.0"

__all__ = [
    "SearchCriteria",
    "SearchOperator",
    "ValueType",
    "MongoWhereCompiler",
    "SQLAlchemyWhereCompiler",
    "get_where_compiler",
]
