import uuid
from typing import Any

from sqlalchemy import text

from .cat_repo import cat_row_to_dict
from .errors import NotFoundError

_CAT_FIELDS = ("id", "name", "race", "sex", "age_in_month", "description", "image_urls", "has_matched", "created_at")


def _cat_columns(alias: str, prefix: str) -> str:
    return ", ".join(f"{alias}.{f} AS {prefix}_{f}" for f in _CAT_FIELDS)


_MATCH_VIEW_SELECT = f"""
    SELECT m.id, m.status, m.message, m.created_at,
           u.name AS issuer_name, u.email AS issuer_email,
           {_cat_columns("rc", "match_cat")},
           {_cat_columns("ic", "user_cat")}
    FROM cat_matches m
    JOIN users u ON u.id = m.issued_by_id
    JOIN cats ic ON ic.id = m.issuer_cat_id
    JOIN cats rc ON rc.id = m.receiver_cat_id
"""


def _row_to_match(row) -> dict[str, Any]:
    r = dict(row)
    return {
        "id": str(r["id"]),
        "status": r["status"],
        "message": r["message"],
        "created_at": r["created_at"],
        "issued_by": {"name": r["issuer_name"], "email": r["issuer_email"]},
        "match_cat": cat_row_to_dict({f: r[f"match_cat_{f}"] for f in _CAT_FIELDS}),
        "user_cat": cat_row_to_dict({f: r[f"user_cat_{f}"] for f in _CAT_FIELDS}),
    }


def create_match(db, *, issued_by_id: str, issuer_cat_id: str, receiver_cat_id: str, message: str) -> str:
    match_id = str(uuid.uuid4())
    db.execute(
        text(
            """
            INSERT INTO cat_matches (id, issued_by_id, issuer_cat_id, receiver_cat_id, message, status)
            VALUES (:id, :issued_by_id, :issuer_cat_id, :receiver_cat_id, :message, 'waiting')
            """
        ),
        {
            "id": match_id,
            "issued_by_id": issued_by_id,
            "issuer_cat_id": issuer_cat_id,
            "receiver_cat_id": receiver_cat_id,
            "message": message,
        },
    )
    return match_id


def list_matches_for_participant(db, participant_id: str) -> list[dict[str, Any]]:
    """Matches where the id is the issuing user, the receiving owner, or either cat."""
    rows = db.execute(
        text(
            _MATCH_VIEW_SELECT
            + """
            WHERE (
                m.issued_by_id = :pid
                OR rc.owned_by_id = :pid
                OR m.issuer_cat_id = :pid
                OR m.receiver_cat_id = :pid
              )
              AND ic.deleted = false
              AND rc.deleted = false
            ORDER BY m.created_at DESC, m.id
            """
        ),
        {"pid": participant_id},
    ).mappings().all()
    return [_row_to_match(r) for r in rows]


def get_match(db, match_id: str) -> dict[str, Any] | None:
    row = db.execute(text(_MATCH_VIEW_SELECT + " WHERE m.id = :id"), {"id": match_id}).mappings().first()
    return _row_to_match(row) if row else None


def get_match_cats(db, match_id: str) -> dict[str, Any] | None:
    row = db.execute(
        text("SELECT issuer_cat_id, receiver_cat_id FROM cat_matches WHERE id=:id"),
        {"id": match_id},
    ).mappings().first()
    return dict(row) if row else None


def can_user_delete_match(db, match_id: str, user_id: str) -> bool:
    row = db.execute(
        text(
            """
            SELECT EXISTS (
              SELECT 1 FROM cat_matches
              WHERE id=:id AND issued_by_id=:user_id
            )
            """
        ),
        {"id": match_id, "user_id": user_id},
    ).first()
    return bool(row[0])


def can_user_respond_match(db, match_id: str, user_id: str) -> bool:
    row = db.execute(
        text(
            """
            SELECT EXISTS (
              SELECT 1
              FROM cat_matches m
              JOIN cats rc ON rc.id = m.receiver_cat_id
              WHERE m.id=:id AND rc.owned_by_id=:user_id
            )
            """
        ),
        {"id": match_id, "user_id": user_id},
    ).first()
    return bool(row[0])


def get_match_status(db, match_id: str) -> str:
    row = db.execute(text("SELECT status FROM cat_matches WHERE id=:id"), {"id": match_id}).first()
    if not row:
        raise NotFoundError("cat match request is not found")
    return str(row[0])


def update_match_status(db, match_id: str, status: str) -> int:
    """Resolve a waiting match; 0 means it was no longer waiting."""
    result = db.execute(
        text("UPDATE cat_matches SET status=:status WHERE id=:id AND status = 'waiting'"),
        {"id": match_id, "status": status},
    )
    return int(result.rowcount or 0)


def reject_competing_matches(db, match_id: str, cat_a_id: str, cat_b_id: str) -> int:
    result = db.execute(
        text(
            """
            UPDATE cat_matches
            SET status = 'rejected'
            WHERE id <> :id
              AND status = 'waiting'
              AND (
                issuer_cat_id IN (:a, :b)
                OR receiver_cat_id IN (:a, :b)
              )
            """
        ),
        {"id": match_id, "a": cat_a_id, "b": cat_b_id},
    )
    return int(result.rowcount or 0)


def delete_match(db, match_id: str) -> int:
    result = db.execute(text("DELETE FROM cat_matches WHERE id=:id AND status = 'waiting'"), {"id": match_id})
    return int(result.rowcount or 0)


def delete_waiting_matches_for_cat(db, cat_id: str) -> int:
    result = db.execute(
        text(
            """
            DELETE FROM cat_matches
            WHERE status = 'waiting'
              AND (issuer_cat_id=:id OR receiver_cat_id=:id)
            """
        ),
        {"id": cat_id},
    )
    return int(result.rowcount or 0)
