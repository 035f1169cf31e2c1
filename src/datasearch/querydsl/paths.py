"""Field path resolution.

Splits a dotted path such as ``customer.address.city`` into the relationship
chain to walk (``("customer", "address")``) and the terminal field name
(``"city"``).
"""

from typing import Tuple

__all__ = ("resolve_path",)


def resolve_path(key: str) -> Tuple[Tuple[str, ...], str]:
    """Resolve a dotted key into ``(navigation_prefix, field_name)``.

    A blank key denotes the record itself and yields ``((), "")``; the empty
    field name must not be used to look up an attribute.
    """
    if key is None or not key.strip():
        return (), ""
    parts = key.split(".")
    return tuple(parts[:-1]), parts[-1]
