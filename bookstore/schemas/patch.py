from pydantic import BaseModel, ConfigDict, Field
from typing import Annotated, Any, List, Literal, Union


class SetOperation(BaseModel):
    op: Literal["add"]
    path: str
    value: Any


class ReplaceOperation(BaseModel):
    op: Literal["replace"]
    path: str
    value: Any


class RemoveOperation(BaseModel):
    op: Literal["remove"]
    path: str


class MoveOperation(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    op: Literal["move"]
    from_path: str = Field(alias="from")
    path: str


class CopyOperation(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    op: Literal["copy"]
    from_path: str = Field(alias="from")
    path: str


class CheckOperation(BaseModel):
    op: Literal["test"]
    path: str
    value: Any


PatchOperation = Annotated[
    Union[SetOperation, ReplaceOperation, RemoveOperation, MoveOperation, CopyOperation, CheckOperation],
    Field(discriminator="op"),
]
PatchDocument = List[PatchOperation]
