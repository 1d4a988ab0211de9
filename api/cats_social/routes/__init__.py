from fastapi import APIRouter, FastAPI

from .auth import router as auth_router
from .cats import router as cats_router
from .match import router as match_router


def include_modular_routers(app: FastAPI) -> None:
    v1 = APIRouter(prefix="/v1")
    v1.include_router(auth_router, prefix="/user", tags=["user"])
    # registered before the cat router so /cat/match is never read as a cat id
    v1.include_router(match_router, prefix="/cat/match", tags=["cat-match"])
    v1.include_router(cats_router, prefix="/cat", tags=["cat"])
    app.include_router(v1)


__all__ = ["include_modular_routers"]
