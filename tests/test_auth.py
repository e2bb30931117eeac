import inspect

import pytest
from fastapi import HTTPException

from agenda.auth import get_current_user
from agenda.models import User


def test_current_user_dependency_runs_in_threadpool():
    assert not inspect.iscoroutinefunction(get_current_user)


def test_current_user_is_created_on_first_sight(db):
    claims = {"sub": "abc", "email": "abc@example.com", "name": "Abc Studio"}

    first = get_current_user(decoded_token=claims, db=db)
    again = get_current_user(decoded_token=claims, db=db)

    assert first.id == again.id
    assert first.email == "abc@example.com"
    assert db.query(User).filter(User.firebase_uid == "abc").count() == 1


def test_current_user_falls_back_to_user_id_claim(db):
    user = get_current_user(decoded_token={"user_id": "xyz"}, db=db)
    assert user.firebase_uid == "xyz"
    assert user.email == "xyz@users.invalid"


def test_claims_without_subject_are_rejected(db):
    with pytest.raises(HTTPException) as exc:
        get_current_user(decoded_token={"email": "nobody@example.com"}, db=db)
    assert exc.value.status_code == 401
