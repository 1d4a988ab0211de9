from typing import Any

from fastapi import APIRouter, Depends, Request

from ..auth.deps import get_current_user
from ..schemas import CatCreated, CatPayload, CatResponse
from ..services import cats as cat_service

router = APIRouter()


@router.post("", status_code=201)
def create_cat(payload: CatPayload, current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    created = cat_service.create_cat(current_user["id"], payload)
    return {"message": "success", "data": CatCreated(**created).model_dump(by_alias=True)}


@router.get("")
def list_cats(request: Request, current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    rows = cat_service.list_cats(current_user["id"], request.query_params)
    return {"message": "success", "data": [CatResponse(**r).model_dump(by_alias=True) for r in rows]}


@router.put("/{cat_id}")
def update_cat(cat_id: str, payload: CatPayload, current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    cat_service.update_cat(cat_id, current_user["id"], payload)
    return {"message": "successfully update cat"}


@router.delete("/{cat_id}")
def delete_cat(cat_id: str, current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    cat_service.delete_cat(cat_id, current_user["id"])
    return {"message": "successfully delete cat"}
