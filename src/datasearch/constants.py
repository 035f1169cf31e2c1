"""
Operator and value-type constants shared by the inferencer and all compilers.
"""

from enum import Enum


class SearchOperator(str, Enum):
    EQ = "EQ"
    NE = "NE"
    GT = "GT"
    GE = "GE"
    LT = "LT"
    LE = "LE"
    EXISTS = "EXISTS"
    # Malformed or unsupported operator text; compiles to no predicate
    UNKNOWN = "UNKNOWN"


class ValueType(str, Enum):
    NUMBER = "NUMBER"
    BOOLEAN = "BOOLEAN"


TIMESTAMP_PATTERN = r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"
NUMBER_PATTERN = r"^(-?)(\d+)([,.0-9]*)$"
REGEX_WITH_OPTIONS_PATTERN = r"^/(.*)/([gimscxdtu]*)$"
REGEX_PATTERN = r"^/(.*)$"
