"""
api/routes/v1/answers.py -- Answer endpoints.

Routes:
  POST   /question/{question_id}/answer/create  -- 201
  PUT    /answer/edit/{answer_id}               -- owner only
  DELETE /answer/delete/{answer_id}             -- owner or admin
  GET    /answer/all/{question_id}
"""

from fastapi import APIRouter, Request

from api.models import AnswerDetailsResponse, AnswerRequest, AnswerResponse
from auth.dependencies import get_access_token
from qa.answers import AnswerService

router = APIRouter()


def _service(request: Request) -> AnswerService:
    return request.app.state.answers


@router.post("/question/{question_id}/answer/create", response_model=AnswerResponse, status_code=201)
def create_answer(request: Request, question_id: str, body: AnswerRequest) -> AnswerResponse:
    answer = _service(request).create_answer(get_access_token(request), question_id, body.answer)
    return AnswerResponse(id=answer.uuid, status="ANSWER CREATED")


@router.put("/answer/edit/{answer_id}", response_model=AnswerResponse)
def edit_answer(request: Request, answer_id: str, body: AnswerRequest) -> AnswerResponse:
    answer = _service(request).edit_answer(get_access_token(request), answer_id, body.answer)
    return AnswerResponse(id=answer.uuid, status="ANSWER EDITED")


@router.delete("/answer/delete/{answer_id}", response_model=AnswerResponse)
def delete_answer(request: Request, answer_id: str) -> AnswerResponse:
    answer = _service(request).delete_answer(get_access_token(request), answer_id)
    return AnswerResponse(id=answer.uuid, status="ANSWER DELETED")


@router.get("/answer/all/{question_id}", response_model=list[AnswerDetailsResponse])
def list_answers(request: Request, question_id: str) -> list[AnswerDetailsResponse]:
    answers = _service(request).list_answers(get_access_token(request), question_id)
    return [AnswerDetailsResponse.from_answer(a) for a in answers]
