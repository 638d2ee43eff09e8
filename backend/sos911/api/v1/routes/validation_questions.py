"""Module: validation_questions.

Security questions a responder can ask to confirm who is on the line.
Answers are stored hashed and are never returned; ``/verify`` compares a
spoken answer against the stored hash.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ConfigDict, Field
from sqlalchemy import select
from sqlalchemy.orm import Session

from sos911.api.v1.routes.deps import CallerIdentity, get_caller, get_db
from sos911.api.v1.schemas import PartialUpdate, RequestModel, ValidationQuestionPayload
from sos911.core.security import hash_answer, verify_answer
from sos911.db.models.validation_question import ValidationQuestion
from sos911.services.crud import apply_changes, delete, ensure_user_exists, get_owned_or_404, list_owned, save

logger = logging.getLogger(__name__)

router = APIRouter()

LABEL = "Validation question"


class ValidationQuestionCreate(RequestModel):
    question: str = Field(min_length=1)
    answer: str = Field(min_length=1)


class ValidationQuestionUpdate(PartialUpdate):
    required_fields = frozenset({"question", "answer"})

    question: str | None = Field(default=None, min_length=1)
    answer: str | None = Field(default=None, min_length=1)


class VerifyAnswerRequest(RequestModel):
    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    question_id: str = Field(alias="questionId", min_length=1)
    answer: str = Field(min_length=1)


def _target_user(db: Session, caller: CallerIdentity, user_id: str) -> str:
    target = caller.resolve_target(user_id)
    ensure_user_exists(db, target)
    return target


def _payload(row: ValidationQuestion) -> dict:
    return ValidationQuestionPayload.model_validate(row).model_dump(mode="json")


# Endpoint: questions in the order they were written.
@router.get("/users/{user_id}/validation-questions")
def list_validation_questions(
    user_id: str,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_caller),
):
    target = _target_user(db, caller, user_id)
    rows = list_owned(db, ValidationQuestion, target, ValidationQuestion.created_at.asc())
    return {"success": True, "data": [_payload(r) for r in rows], "count": len(rows)}


@router.post("/users/{user_id}/validation-questions", status_code=201)
def create_validation_question(
    user_id: str,
    payload: ValidationQuestionCreate,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_caller),
):
    target = _target_user(db, caller, user_id)
    row = save(
        db,
        ValidationQuestion(user_id=target, question=payload.question, answer_hash=hash_answer(payload.answer)),
        "A validation question with this information already exists",
    )
    return {"success": True, "data": _payload(row), "message": "Validation question created successfully"}


@router.put("/users/{user_id}/validation-questions/{question_id}")
def update_validation_question(
    user_id: str,
    question_id: str,
    payload: ValidationQuestionUpdate,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_caller),
):
    target = _target_user(db, caller, user_id)
    row = get_owned_or_404(db, ValidationQuestion, question_id, target, LABEL)

    changes = payload.changes()
    if "answer" in changes:
        changes["answer_hash"] = hash_answer(changes.pop("answer"))
    apply_changes(row, changes)
    db.commit()
    db.refresh(row)
    return {"success": True, "data": _payload(row), "message": "Validation question updated successfully"}


@router.delete("/users/{user_id}/validation-questions/{question_id}")
def delete_validation_question(
    user_id: str,
    question_id: str,
    db: Session = Depends(get_db),
    caller: CallerIdentity = Depends(get_caller),
):
    target = _target_user(db, caller, user_id)
    row = get_owned_or_404(db, ValidationQuestion, question_id, target, LABEL)
    delete(db, row)
    return {"success": True, "message": "Validation question deleted successfully"}


# Endpoint: open to unauthenticated callers; the question id is the only key.
@router.post("/validation-questions/verify")
def verify_validation_answer(payload: VerifyAnswerRequest, db: Session = Depends(get_db)):
    row = db.execute(
        select(ValidationQuestion).where(ValidationQuestion.id == payload.question_id)
    ).scalar_one_or_none()
    if not row:
        raise HTTPException(status_code=404, detail="Validation question not found")

    verified = verify_answer(payload.answer, row.answer_hash)
    logger.info("Validation question %s answered (verified=%s)", row.id, verified)
    return {
        "success": True,
        "verified": verified,
        "message": "Answer is correct" if verified else "Answer is incorrect",
    }
