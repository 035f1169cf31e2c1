"""Query DSL module.

Turns `SearchCriteria` into backend-native predicates. Value inference and
path resolution are shared; the backend-specific where compilers live in the
`compilers` subpackage.
"""

from .inference import ValueInferencer, format_value, infer
from .paths import resolve_path

__all__ = ("ValueInferencer", "format_value", "infer", "resolve_path")
