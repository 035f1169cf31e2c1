"""Type aliases for the datasearch package.

This module provides reusable type definitions to ensure consistency
across the codebase and improve code readability.
"""

from datetime import datetime
from typing import Any, Callable, List, Sequence, Union

# Scalar result of value inference
Scalar = Union[None, bool, int, float, datetime, str]

# Inferred value - a scalar or a flat list of scalars
Value = Union[Scalar, List[Scalar]]

# Navigation prefix (relationship names) produced by path resolution
PathPrefix = Sequence[str]

# Caller-supplied navigation: relationship chain -> entity exposing the terminal attribute
PathFactory = Callable[[PathPrefix], Any]
