"""
Translate ``GET /v1/cat`` query parameters into SQL predicates.

Every accepted key maps to a fixed column and operator; values only ever
travel as bind parameters. Unknown keys and malformed values are dropped,
so a bad filter widens the result instead of failing the request.
"""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field
from typing import Any, Mapping

from ..config import CAT_LIST_DEFAULT_LIMIT, CAT_LIST_MAX_LIMIT, CAT_RACES, CAT_SEXES

_AGE_PATTERN = re.compile(r"^([<>=]?)(\d+)$")


@dataclass
class CatFilter:
    where: list[str] = field(default_factory=list)
    params: dict[str, Any] = field(default_factory=dict)
    limit: int = CAT_LIST_DEFAULT_LIMIT
    offset: int = 0


def _parse_bool(value: str) -> bool | None:
    v = value.strip().lower()
    if v == "true":
        return True
    if v == "false":
        return False
    return None


def _parse_non_negative(value: str) -> int | None:
    v = value.strip()
    if not v.isdigit():
        return None
    return int(v)


def _filter_id(f: CatFilter, value: str, user_id: str) -> None:
    try:
        f.params["id"] = str(uuid.UUID(value))
    except ValueError:
        return
    f.where.append("id = :id")


def _filter_race(f: CatFilter, value: str, user_id: str) -> None:
    if value in CAT_RACES:
        f.where.append("race = :race")
        f.params["race"] = value


def _filter_sex(f: CatFilter, value: str, user_id: str) -> None:
    if value in CAT_SEXES:
        f.where.append("sex = :sex")
        f.params["sex"] = value


def _filter_has_matched(f: CatFilter, value: str, user_id: str) -> None:
    flag = _parse_bool(value)
    if flag is None:
        return
    f.where.append("has_matched = :has_matched")
    f.params["has_matched"] = flag


def _filter_age(f: CatFilter, value: str, user_id: str) -> None:
    m = _AGE_PATTERN.match(value.strip())
    if not m:
        return
    op = m.group(1) or "="
    f.where.append(f"age_in_month {op} :age_in_month")
    f.params["age_in_month"] = int(m.group(2))


def _filter_owned(f: CatFilter, value: str, user_id: str) -> None:
    flag = _parse_bool(value)
    if flag is None:
        return
    f.where.append("owned_by_id = :owner_id" if flag else "owned_by_id <> :owner_id")
    f.params["owner_id"] = user_id


def _filter_search(f: CatFilter, value: str, user_id: str) -> None:
    f.where.append("LOWER(name) LIKE :search")
    f.params["search"] = f"%{value.lower()}%"


FILTERS = {
    "id": _filter_id,
    "race": _filter_race,
    "sex": _filter_sex,
    "hasMatched": _filter_has_matched,
    "ageInMonth": _filter_age,
    "owned": _filter_owned,
    "search": _filter_search,
}


def build_cat_filter(query: Mapping[str, str], user_id: str) -> CatFilter:
    f = CatFilter()
    for key, apply in FILTERS.items():
        value = query.get(key)
        if value is None or value == "":
            continue
        apply(f, value, user_id)

    limit = _parse_non_negative(query.get("limit") or "")
    if limit is not None:
        f.limit = min(limit, CAT_LIST_MAX_LIMIT)
    offset = _parse_non_negative(query.get("offset") or "")
    if offset is not None:
        f.offset = offset
    return f
