import logging
from typing import Any, Mapping

from sqlalchemy.exc import SQLAlchemyError

from .. import cat_repo, match_repo
from ..database import SessionLocal
from ..errors import BadRequestError, InternalError, NotFoundError
from ..schemas import CatPayload
from .cat_filters import build_cat_filter

logger = logging.getLogger(__name__)


def create_cat(owner_id: str, payload: CatPayload) -> dict[str, Any]:
    with SessionLocal() as db:
        try:
            created = cat_repo.create_cat(
                db,
                owner_id=owner_id,
                name=payload.name,
                race=payload.race,
                sex=payload.sex,
                age_in_month=payload.age_in_month,
                description=payload.description,
                image_urls=payload.image_urls,
            )
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("create cat failed owner_id=%s", owner_id)
            raise InternalError("failed to create cat") from exc
    logger.info("cat created id=%s owner_id=%s", created["id"], owner_id)
    return created


def list_cats(user_id: str, query: Mapping[str, str]) -> list[dict[str, Any]]:
    f = build_cat_filter(query, user_id)
    with SessionLocal() as db:
        try:
            return cat_repo.list_cats(db, f.where, f.params, limit=f.limit, offset=f.offset)
        except SQLAlchemyError as exc:
            logger.exception("list cats failed user_id=%s", user_id)
            raise InternalError("failed to get cats") from exc
        finally:
            db.rollback()


def update_cat(cat_id: str, user_id: str, payload: CatPayload) -> None:
    with SessionLocal() as db:
        try:
            current = cat_repo.get_owned_cat(db, cat_id, user_id)
            if not current:
                raise NotFoundError("cat is not found")
            if payload.sex != current["sex"] and cat_repo.cat_has_match_requests(db, cat_id):
                raise BadRequestError("cannot edit sex of a cat that has match requests")
            cat_repo.update_cat(
                db,
                cat_id,
                name=payload.name,
                race=payload.race,
                sex=payload.sex,
                age_in_month=payload.age_in_month,
                description=payload.description,
                image_urls=payload.image_urls,
            )
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("update cat failed id=%s", cat_id)
            raise InternalError("failed to update cat") from exc


def delete_cat(cat_id: str, user_id: str) -> None:
    with SessionLocal() as db:
        try:
            if not cat_repo.cat_owned_by(db, cat_id, user_id):
                raise NotFoundError("cat is not found")
            cat_repo.soft_delete_cat(db, cat_id)
            removed = match_repo.delete_waiting_matches_for_cat(db, cat_id)
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("delete cat failed id=%s", cat_id)
            raise InternalError("failed to delete cat") from exc
    logger.info("cat deleted id=%s removed_waiting_matches=%s", cat_id, removed)
