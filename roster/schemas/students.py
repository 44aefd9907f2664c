from typing import Annotated

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    field_validator,
)

RequiredStr = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=120)
]
OptionalStr = Annotated[str, StringConstraints(strip_whitespace=True, max_length=120)]


class StudentIn(BaseModel):
    """Body of POST/PUT /students. Updates replace all four fields."""

    student_id: Annotated[
        str, StringConstraints(strip_whitespace=True, min_length=1, max_length=64)
    ]
    firstname: RequiredStr
    lastname: OptionalStr = ""
    nickname: OptionalStr = ""

    @field_validator("lastname", "nickname", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return "" if value is None else value


class StudentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    # opaque to clients: the integer key travels as a string
    id: str = Field(alias="_id")
    student_id: str
    firstname: str
    lastname: str = ""
    nickname: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _opaque_id(cls, value):
        return str(value)


class PaginationOut(BaseModel):
    total: int
    page: int
    limit: int
    totalPages: int


class StudentPageOut(BaseModel):
    students: list[StudentOut]
    pagination: PaginationOut


class MessageOut(BaseModel):
    message: str


class ErrorOut(BaseModel):
    message: str
    kind: str
