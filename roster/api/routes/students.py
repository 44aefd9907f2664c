# roster/api/routes/students.py
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from roster.deps import get_student_service
from roster.schemas.students import (
    ErrorOut,
    MessageOut,
    StudentIn,
    StudentOut,
    StudentPageOut,
)
from roster.services.student_query import StudentQueryService

router = APIRouter(prefix="/students", tags=["students"])

Service = Annotated[StudentQueryService, Depends(get_student_service)]

# raw strings: bad values fall back to defaults instead of a 422
PageParam = Annotated[str | None, Query(description="Página (1-based)")]
LimitParam = Annotated[str | None, Query(description="Itens por página")]

NOT_FOUND = {404: {"model": ErrorOut}}
BAD_REQUEST = {400: {"model": ErrorOut}}


@router.get("", response_model=StudentPageOut)
def list_students(service: Service, page: PageParam = None, limit: LimitParam = None):
    return service.list_students(page, limit)


@router.get("/search/{text:path}", response_model=StudentPageOut)
def search_students(
    text: str, service: Service, page: PageParam = None, limit: LimitParam = None
):
    # path params chegam já decodificados
    return service.search_students(text, page, limit)


@router.get("/{student_pk}", response_model=StudentOut, responses=NOT_FOUND)
def get_student(student_pk: str, service: Service):
    return service.get_student(student_pk)


@router.post(
    "",
    response_model=StudentOut,
    status_code=status.HTTP_201_CREATED,
    responses=BAD_REQUEST,
)
def create_student(payload: StudentIn, service: Service):
    return service.create_student(payload)


@router.put(
    "/{student_pk}",
    response_model=StudentOut,
    responses={**BAD_REQUEST, **NOT_FOUND},
)
def update_student(student_pk: str, payload: StudentIn, service: Service):
    return service.update_student(student_pk, payload)


@router.delete("/{student_pk}", response_model=MessageOut, responses=NOT_FOUND)
def delete_student(student_pk: str, service: Service):
    service.delete_student(student_pk)
    return MessageOut(message="Student deleted successfully")
