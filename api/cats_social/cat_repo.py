import json
import uuid
from typing import Any

from sqlalchemy import text

CAT_PUBLIC_COLUMNS = "id, name, race, sex, age_in_month, description, image_urls, has_matched, created_at"


def _for_update(db) -> str:
    # SQLite has no row-level locks
    return "FOR UPDATE" if db.get_bind().dialect.name == "postgresql" else ""


def load_image_urls(value: Any) -> list[str]:
    if isinstance(value, list):
        return value
    if not value:
        return []
    parsed = json.loads(value)
    return parsed if isinstance(parsed, list) else []


def cat_row_to_dict(row) -> dict[str, Any]:
    out = dict(row)
    out["image_urls"] = load_image_urls(out.get("image_urls"))
    out["has_matched"] = bool(out.get("has_matched"))
    return out


def create_cat(
    db,
    *,
    owner_id: str,
    name: str,
    race: str,
    sex: str,
    age_in_month: int,
    description: str,
    image_urls: list[str],
) -> dict[str, Any]:
    cat_id = str(uuid.uuid4())
    db.execute(
        text(
            """
            INSERT INTO cats (id, name, race, sex, age_in_month, description, image_urls, has_matched, owned_by_id, deleted)
            VALUES (:id, :name, :race, :sex, :age_in_month, :description, :image_urls, false, :owned_by_id, false)
            """
        ),
        {
            "id": cat_id,
            "name": name,
            "race": race,
            "sex": sex,
            "age_in_month": age_in_month,
            "description": description,
            "image_urls": json.dumps(image_urls),
            "owned_by_id": owner_id,
        },
    )
    row = db.execute(text("SELECT id, created_at FROM cats WHERE id=:id"), {"id": cat_id}).mappings().first()
    return dict(row)


def list_cats(db, where: list[str], params: dict[str, Any], *, limit: int, offset: int) -> list[dict[str, Any]]:
    clauses = ["deleted = false", *where]
    rows = db.execute(
        text(
            f"""
            SELECT {CAT_PUBLIC_COLUMNS}
            FROM cats
            WHERE {" AND ".join(clauses)}
            ORDER BY created_at DESC, id
            LIMIT :limit OFFSET :offset
            """
        ),
        {**params, "limit": limit, "offset": offset},
    ).mappings().all()
    return [cat_row_to_dict(r) for r in rows]


def get_owned_cat(db, cat_id: str, user_id: str) -> dict[str, Any] | None:
    row = db.execute(
        text(
            f"""
            SELECT {CAT_PUBLIC_COLUMNS}
            FROM cats
            WHERE id=:id AND owned_by_id=:user_id AND deleted = false
            """
        ),
        {"id": cat_id, "user_id": user_id},
    ).mappings().first()
    return cat_row_to_dict(row) if row else None


def update_cat(
    db,
    cat_id: str,
    *,
    name: str,
    race: str,
    sex: str,
    age_in_month: int,
    description: str,
    image_urls: list[str],
) -> None:
    db.execute(
        text(
            """
            UPDATE cats
            SET name=:name,
                race=:race,
                sex=:sex,
                age_in_month=:age_in_month,
                description=:description,
                image_urls=:image_urls
            WHERE id=:id
            """
        ),
        {
            "id": cat_id,
            "name": name,
            "race": race,
            "sex": sex,
            "age_in_month": age_in_month,
            "description": description,
            "image_urls": json.dumps(image_urls),
        },
    )


def soft_delete_cat(db, cat_id: str) -> None:
    db.execute(text("UPDATE cats SET deleted = true WHERE id=:id"), {"id": cat_id})


def cat_owned_by(db, cat_id: str, user_id: str) -> bool:
    row = db.execute(
        text(
            """
            SELECT EXISTS (
              SELECT 1 FROM cats
              WHERE id=:id AND owned_by_id=:user_id AND deleted = false
            )
            """
        ),
        {"id": cat_id, "user_id": user_id},
    ).first()
    return bool(row[0])


def cat_has_match_requests(db, cat_id: str) -> bool:
    row = db.execute(
        text(
            """
            SELECT EXISTS (
              SELECT 1 FROM cat_matches
              WHERE issuer_cat_id=:id OR receiver_cat_id=:id
            )
            """
        ),
        {"id": cat_id},
    ).first()
    return bool(row[0])


def both_cats_exist(db, cat_a_id: str, cat_b_id: str) -> bool:
    row = db.execute(
        text(
            """
            SELECT EXISTS (
              SELECT 1 FROM cats WHERE id=:a AND deleted = false
            ) AND EXISTS (
              SELECT 1 FROM cats WHERE id=:b AND deleted = false
            )
            """
        ),
        {"a": cat_a_id, "b": cat_b_id},
    ).first()
    return bool(row[0])


def _compare_pair(db, expression: str, cat_a_id: str, cat_b_id: str) -> bool:
    row = db.execute(
        text(
            f"""
            SELECT {expression}
            FROM cats c1
            JOIN cats c2 ON c2.id <> c1.id
            WHERE c1.id=:a AND c2.id=:b
            """
        ),
        {"a": cat_a_id, "b": cat_b_id},
    ).first()
    return bool(row[0]) if row else False


def cats_have_same_sex(db, cat_a_id: str, cat_b_id: str) -> bool:
    return _compare_pair(db, "c1.sex = c2.sex", cat_a_id, cat_b_id)


def cats_from_same_owner(db, cat_a_id: str, cat_b_id: str) -> bool:
    return _compare_pair(db, "c1.owned_by_id = c2.owned_by_id", cat_a_id, cat_b_id)


def cats_have_matched(db, cat_a_id: str, cat_b_id: str) -> bool:
    return _compare_pair(db, "c1.has_matched OR c2.has_matched", cat_a_id, cat_b_id)


def lock_cats(db, cat_a_id: str, cat_b_id: str) -> list[dict[str, Any]]:
    rows = db.execute(
        text(
            f"""
            SELECT id, has_matched, deleted
            FROM cats
            WHERE id IN (:a, :b)
            ORDER BY id
            {_for_update(db)}
            """
        ),
        {"a": cat_a_id, "b": cat_b_id},
    ).mappings().all()
    return [{**r, "has_matched": bool(r["has_matched"]), "deleted": bool(r["deleted"])} for r in rows]


def mark_cats_matched(db, cat_a_id: str, cat_b_id: str) -> int:
    result = db.execute(
        text(
            """
            UPDATE cats
            SET has_matched = true
            WHERE id IN (:a, :b) AND has_matched = false AND deleted = false
            """
        ),
        {"a": cat_a_id, "b": cat_b_id},
    )
    return int(result.rowcount or 0)
