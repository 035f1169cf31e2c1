"""Pydantic schemas for search criteria."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .constants import SearchOperator, ValueType


class SearchCriteria(BaseModel):
    """One field-level filter request awaiting compilation.

    Produced by a search-expression tokenizer and consumed by exactly one
    where compiler. Instances are immutable.

    Examples:
        SearchCriteria(key="customer.address.city", op=SearchOperator.EQ, value="Paris")
        SearchCriteria(key="status", op="NE", value="NEW,PAID", array=True)
        SearchCriteria(key="deleted_at", op="EXISTS", exists=False)
    """

    model_config = ConfigDict(frozen=True)

    key: str = Field("", description="Dotted field path; blank denotes the record itself.")
    op: SearchOperator = Field(..., description="Comparison operator.")
    value: Optional[str] = Field(None, description="Raw, unparsed value text.")
    array: bool = Field(False, description="Split the value on unescaped commas for membership tests.")
    exists: bool = Field(False, description="For EXISTS: whether the field must be present.")
    type: Optional[ValueType] = Field(None, description="Advisory value type for schema-less backends.")

    def __str__(self) -> str:
        op = getattr(self.op, "value", self.op)
        return f"{self.key} {op} {self.value!r}"
