"""
Cat match requests: eligibility rules and the waiting -> accepted/rejected lifecycle.

Each public function runs in exactly one transaction. Domain errors raised
inside the ``with SessionLocal()`` block leave the session without a commit,
so nothing written before the failure becomes visible. Persistence failures
are logged with their cause and surfaced only as ``InternalError``.
"""

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .. import cat_repo, match_repo
from ..database import SessionLocal
from ..errors import BadRequestError, InternalError, NotFoundError
from ..schemas import MatchCreateRequest, MatchUpdateRequest
from .state_machine import MatchStatus, action_for_status, transition_status

logger = logging.getLogger(__name__)

CREATED_MESSAGE = "successfully send match request"
NOT_WAITING_MESSAGE = "cat match request is no longer waiting"
DELETE_NOT_WAITING_MESSAGE = "cannot delete non waiting cat match request"


def create_match(requester_id: str, payload: MatchCreateRequest) -> str:
    user_cat_id = payload.user_cat_id
    match_cat_id = payload.match_cat_id

    if user_cat_id == match_cat_id:
        raise BadRequestError("cannot match a cat with itself")

    with SessionLocal() as db:
        try:
            if not cat_repo.both_cats_exist(db, user_cat_id, match_cat_id):
                raise BadRequestError("cat is not found")
            if not cat_repo.cat_owned_by(db, user_cat_id, requester_id):
                raise NotFoundError("user cat is not found")
            if cat_repo.cats_have_same_sex(db, user_cat_id, match_cat_id):
                raise BadRequestError("cats must have different sex")
            if cat_repo.cats_from_same_owner(db, user_cat_id, match_cat_id):
                raise BadRequestError("cannot match own cat")
            if cat_repo.cats_have_matched(db, user_cat_id, match_cat_id):
                raise BadRequestError("cat already matched")

            match_id = match_repo.create_match(
                db,
                issued_by_id=requester_id,
                issuer_cat_id=user_cat_id,
                receiver_cat_id=match_cat_id,
                message=payload.message,
            )
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            logger.exception("create cat match rejected by constraint requester=%s", requester_id)
            raise BadRequestError("failed to create cat match") from exc
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("create cat match failed requester=%s", requester_id)
            raise InternalError("failed to create cat match") from exc

    logger.info("cat match created id=%s issuer_cat=%s receiver_cat=%s", match_id, user_cat_id, match_cat_id)
    return CREATED_MESSAGE


def list_matches(participant_id: str) -> list[dict[str, Any]]:
    with SessionLocal() as db:
        try:
            return match_repo.list_matches_for_participant(db, participant_id)
        except SQLAlchemyError as exc:
            logger.exception("list cat matches failed participant=%s", participant_id)
            raise InternalError("failed to get cat match") from exc
        finally:
            # read-only: never committed
            db.rollback()


def delete_match(match_id: str, requester_id: str) -> None:
    with SessionLocal() as db:
        try:
            if not match_repo.can_user_delete_match(db, match_id, requester_id):
                raise NotFoundError("cat match request is not found")
            status = match_repo.get_match_status(db, match_id)
            if status != MatchStatus.WAITING.value:
                raise BadRequestError(DELETE_NOT_WAITING_MESSAGE)
            if match_repo.delete_match(db, match_id) != 1:
                raise BadRequestError(DELETE_NOT_WAITING_MESSAGE)
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("delete cat match failed id=%s", match_id)
            raise InternalError("something went wrong") from exc

        try:
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("delete cat match commit failed id=%s", match_id)
            raise InternalError("failed to commit transaction") from exc

    logger.info("cat match deleted id=%s requester=%s", match_id, requester_id)


def _accept(db, match_id: str) -> None:
    cats = match_repo.get_match_cats(db, match_id)
    issuer_cat_id = cats["issuer_cat_id"]
    receiver_cat_id = cats["receiver_cat_id"]

    locked = cat_repo.lock_cats(db, issuer_cat_id, receiver_cat_id)
    if len(locked) != 2 or any(c["deleted"] for c in locked):
        raise BadRequestError("cat is not found")
    if any(c["has_matched"] for c in locked):
        raise BadRequestError("cat already matched")

    if cat_repo.mark_cats_matched(db, issuer_cat_id, receiver_cat_id) != 2:
        raise BadRequestError("cat already matched")
    if match_repo.update_match_status(db, match_id, MatchStatus.ACCEPTED.value) != 1:
        raise BadRequestError(NOT_WAITING_MESSAGE)
    rejected = match_repo.reject_competing_matches(db, match_id, issuer_cat_id, receiver_cat_id)
    logger.info("cat match accepted id=%s competing_rejected=%s", match_id, rejected)


def update_match(match_id: str, requester_id: str, payload: MatchUpdateRequest) -> dict[str, Any]:
    action = action_for_status(payload.status)

    with SessionLocal() as db:
        try:
            if not match_repo.can_user_respond_match(db, match_id, requester_id):
                raise NotFoundError("cat match request is not found")

            current = match_repo.get_match_status(db, match_id)
            new_status = transition_status(current, action)
            if new_status == current:
                raise BadRequestError(NOT_WAITING_MESSAGE)

            if new_status == MatchStatus.ACCEPTED.value:
                _accept(db, match_id)
            elif match_repo.update_match_status(db, match_id, new_status) != 1:
                raise BadRequestError(NOT_WAITING_MESSAGE)

            db.commit()
            view = match_repo.get_match(db, match_id)
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("update cat match failed id=%s", match_id)
            raise InternalError("failed to update cat match") from exc

    return view
