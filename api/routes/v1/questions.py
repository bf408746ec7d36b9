"""
api/routes/v1/questions.py -- Question endpoints.

Routes:
  POST   /question/create                -- 201
  GET    /question/all
  GET    /question/all/{user_id}
  PUT    /question/edit/{question_id}    -- owner only
  DELETE /question/delete/{question_id}  -- owner or admin

Handlers are thin: pull the token, call QuestionService, map the result.
Authentication and permission failures surface as QuoraError subclasses and
are rendered by the handler in api/main.py.
"""

from fastapi import APIRouter, Request

from api.models import QuestionDetailsResponse, QuestionRequest, QuestionResponse
from auth.dependencies import get_access_token
from qa.questions import QuestionService

router = APIRouter()


def _service(request: Request) -> QuestionService:
    return request.app.state.questions


@router.post("/question/create", response_model=QuestionResponse, status_code=201)
def create_question(request: Request, body: QuestionRequest) -> QuestionResponse:
    question = _service(request).create_question(get_access_token(request), body.content)
    return QuestionResponse(id=question.uuid, status="QUESTION CREATED")


@router.get("/question/all", response_model=list[QuestionDetailsResponse])
def list_questions(request: Request) -> list[QuestionDetailsResponse]:
    questions = _service(request).list_questions(get_access_token(request))
    return [QuestionDetailsResponse.from_question(q) for q in questions]


@router.get("/question/all/{user_id}", response_model=list[QuestionDetailsResponse])
def list_questions_by_user(request: Request, user_id: str) -> list[QuestionDetailsResponse]:
    questions = _service(request).list_questions_by_user(get_access_token(request), user_id)
    return [QuestionDetailsResponse.from_question(q) for q in questions]


@router.put("/question/edit/{question_id}", response_model=QuestionResponse)
def edit_question(request: Request, question_id: str, body: QuestionRequest) -> QuestionResponse:
    question = _service(request).edit_question(get_access_token(request), question_id, body.content)
    return QuestionResponse(id=question.uuid, status="QUESTION EDITED")


@router.delete("/question/delete/{question_id}", response_model=QuestionResponse)
def delete_question(request: Request, question_id: str) -> QuestionResponse:
    question = _service(request).delete_question(get_access_token(request), question_id)
    return QuestionResponse(id=question.uuid, status="QUESTION DELETED")
