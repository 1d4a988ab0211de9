import pytest

from cats_social.errors import BadRequestError, NotFoundError
from cats_social.schemas import CatPayload, MatchCreateRequest
from cats_social.services import cat_match, cats as cat_service


def _payload(**overrides) -> CatPayload:
    data = {
        "name": "Tom",
        "race": "Persian",
        "sex": "male",
        "age_in_month": 12,
        "description": "friendly cat",
        "image_urls": ["https://img.example.com/tom.png"],
    }
    data.update(overrides)
    return CatPayload(**data)


def test_create_and_list_own_cats(seed):
    owner = seed.user()
    other = seed.user()
    created = cat_service.create_cat(owner, _payload(name="Tom"))
    cat_service.create_cat(other, _payload(name="Kitty", sex="female"))

    mine = cat_service.list_cats(owner, {"owned": "true"})
    assert [c["id"] for c in mine] == [created["id"]]
    assert mine[0]["image_urls"] == ["https://img.example.com/tom.png"]
    assert mine[0]["has_matched"] is False

    theirs = cat_service.list_cats(owner, {"owned": "false"})
    assert [c["name"] for c in theirs] == ["Kitty"]


def test_list_filters_by_age_and_search(seed):
    owner = seed.user()
    cat_service.create_cat(owner, _payload(name="Young Tom", age_in_month=3))
    cat_service.create_cat(owner, _payload(name="Old Felix", age_in_month=60))

    older = cat_service.list_cats(owner, {"ageInMonth": ">12"})
    assert [c["name"] for c in older] == ["Old Felix"]
    assert [c["name"] for c in cat_service.list_cats(owner, {"search": "tom"})] == ["Young Tom"]
    assert len(cat_service.list_cats(owner, {"limit": "1"})) == 1


def test_update_and_delete_require_ownership(seed):
    owner = seed.user()
    stranger = seed.user()
    created = cat_service.create_cat(owner, _payload())

    with pytest.raises(NotFoundError):
        cat_service.update_cat(created["id"], stranger, _payload(name="Stolen"))
    with pytest.raises(NotFoundError):
        cat_service.delete_cat(created["id"], stranger)

    cat_service.update_cat(created["id"], owner, _payload(name="Thomas", age_in_month=13))
    row = cat_service.list_cats(owner, {"id": created["id"]})[0]
    assert row["name"] == "Thomas"
    assert row["age_in_month"] == 13


def test_sex_is_immutable_once_cat_has_match_requests(seed):
    u1 = seed.user()
    u2 = seed.user()
    tom = seed.cat(u1, sex="male")
    kitty = seed.cat(u2, sex="female")
    cat_match.create_match(u1, MatchCreateRequest(user_cat_id=tom, match_cat_id=kitty, message="hello there"))

    with pytest.raises(BadRequestError):
        cat_service.update_cat(tom, u1, _payload(sex="female"))
    cat_service.update_cat(tom, u1, _payload(sex="male", name="Tommy"))


def test_delete_cat_hides_it_and_drops_waiting_requests(seed):
    u1 = seed.user()
    u2 = seed.user()
    tom = seed.cat(u1, sex="male")
    kitty = seed.cat(u2, sex="female")
    cat_match.create_match(u1, MatchCreateRequest(user_cat_id=tom, match_cat_id=kitty, message="hello there"))

    cat_service.delete_cat(kitty, u2)

    assert cat_service.list_cats(u2, {"owned": "true"}) == []
    assert seed.count("SELECT COUNT(*) FROM cat_matches") == 0
    with pytest.raises(BadRequestError):
        cat_match.create_match(u1, MatchCreateRequest(user_cat_id=tom, match_cat_id=kitty, message="hello again"))
