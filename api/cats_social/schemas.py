from datetime import datetime
from typing import Literal
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .config import CAT_MAX_AGE_IN_MONTH

CatRace = Literal[
    "Persian",
    "Maine Coon",
    "Siamese",
    "Ragdoll",
    "Bengal",
    "Sphynx",
    "British Shorthair",
    "Abyssinian",
    "Scottish Fold",
    "Birman",
]
CatSex = Literal["male", "female"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterRequest(CamelModel):
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$", max_length=254)
    name: str = Field(min_length=5, max_length=50)
    password: str = Field(min_length=5, max_length=15)


class LoginRequest(CamelModel):
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$", max_length=254)
    password: str = Field(min_length=5, max_length=15)


class AuthData(CamelModel):
    email: str
    name: str
    access_token: str


class CatPayload(CamelModel):
    name: str = Field(min_length=1, max_length=30)
    race: CatRace
    sex: CatSex
    age_in_month: int = Field(ge=1, le=CAT_MAX_AGE_IN_MONTH)
    description: str = Field(min_length=1, max_length=200)
    image_urls: list[str] = Field(min_length=1)

    @field_validator("image_urls")
    @classmethod
    def _valid_urls(cls, values: list[str]) -> list[str]:
        for value in values:
            if not value:
                raise ValueError("image urls cannot have empty item")
            parsed = urlparse(value)
            if parsed.scheme not in {"http", "https"} or not parsed.netloc:
                raise ValueError("image url should have valid url")
        return values


class CatCreated(CamelModel):
    id: str
    created_at: datetime


class CatResponse(CamelModel):
    id: str
    name: str
    race: str
    sex: str
    age_in_month: int
    description: str
    image_urls: list[str]
    has_matched: bool
    created_at: datetime


class MatchCreateRequest(CamelModel):
    match_cat_id: str
    user_cat_id: str
    message: str = Field(min_length=5, max_length=120)


class MatchUpdateRequest(CamelModel):
    status: Literal["accepted", "rejected"]


class IssuedBy(CamelModel):
    name: str
    email: str


class MatchView(CamelModel):
    id: str
    status: str
    message: str
    created_at: datetime
    issued_by: IssuedBy
    match_cat: CatResponse
    user_cat: CatResponse
