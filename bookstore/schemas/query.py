from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Literal, Optional, get_args

FilterOperator = Literal[
    "Equal",
    "NotEqual",
    "Contains",
    "StartsWith",
    "EndsWith",
    "GreaterThan",
    "GreaterThanOrEqual",
    "LessThan",
    "LessThanOrEqual",
]
SortOrder = Literal["asc", "desc"]

_OPERATORS_BY_KEY = {name.lower(): name for name in get_args(FilterOperator)}


class FilterCriterion(BaseModel):
    """One ``{"PropertyName", "Operator", "Value"}`` item of the ``filters`` parameter."""

    model_config = ConfigDict(populate_by_name=True)

    property_name: str = Field(alias="PropertyName", min_length=1)
    operator: FilterOperator = Field(alias="Operator")
    value: Optional[Any] = Field(default=None, alias="Value")

    @field_validator("operator", mode="before")
    @classmethod
    def _normalize_operator(cls, value):
        if isinstance(value, str):
            return _OPERATORS_BY_KEY.get(value.strip().lower(), value)
        return value
