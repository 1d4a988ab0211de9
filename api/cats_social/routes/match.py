from typing import Any

from fastapi import APIRouter, Depends

from ..auth.deps import get_current_user
from ..config import RL_MATCH_CREATE_LIMIT, RL_WINDOW_SECONDS
from ..schemas import MatchCreateRequest, MatchUpdateRequest, MatchView
from ..services import cat_match
from ..services.rate_limit import limit_per_user

router = APIRouter()

RL_MATCH_CREATE = limit_per_user("match_create", RL_MATCH_CREATE_LIMIT, RL_WINDOW_SECONDS)


@router.post("", status_code=201)
def create_match(
    payload: MatchCreateRequest,
    current_user: dict[str, Any] = Depends(get_current_user),
    _: None = RL_MATCH_CREATE,
) -> dict[str, Any]:
    message = cat_match.create_match(current_user["id"], payload)
    return {"message": message}


@router.get("")
def list_matches(current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    rows = cat_match.list_matches(current_user["id"])
    return {"message": "success", "data": [MatchView(**r).model_dump(by_alias=True) for r in rows]}


@router.put("/{match_id}")
def update_match(
    match_id: str,
    payload: MatchUpdateRequest,
    current_user: dict[str, Any] = Depends(get_current_user),
) -> dict[str, Any]:
    view = cat_match.update_match(match_id, current_user["id"], payload)
    return {"message": "success", "data": MatchView(**view).model_dump(by_alias=True)}


@router.delete("/{match_id}")
def delete_match(match_id: str, current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    cat_match.delete_match(match_id, current_user["id"])
    return {"message": "successfully remove a cat match request"}
