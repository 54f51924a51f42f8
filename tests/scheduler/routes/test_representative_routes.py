import pytest
from fastapi import HTTPException, Response, status

from scheduler.auth.dependencies import CallerContext
from scheduler.routes.common import DATABASE_UNAVAILABLE_DETAIL
from scheduler.routes.representative_routes import (
    UpdateProfileRequest,
    get_my_profile,
    list_representatives,
    update_my_profile,
)
from tests.factories import add_representative


def _caller(representative) -> CallerContext:
    return CallerContext(
        user_id=representative.user_id,
        email='rep@example.com',
        role='representative',
        representative_id=representative.id,
    )


def _database_down() -> None:
    raise HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=DATABASE_UNAVAILABLE_DETAIL,
    )


@pytest.fixture
def schema_ready(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr('scheduler.routes.representative_routes.ensure_database_ready', lambda: None)


@pytest.fixture
def schema_unavailable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr('scheduler.routes.representative_routes.ensure_database_ready', _database_down)


def test_get_my_profile_returns_callers_profile(db, schema_ready) -> None:
    rep = add_representative(db)

    profile = get_my_profile(caller=_caller(rep), db=db)

    assert profile.id == rep.id
    assert profile.department == 'Visas'


def test_update_my_profile_applies_field_updates(db, schema_ready) -> None:
    rep = add_representative(db)
    response = Response()
    data = UpdateProfileRequest(updates=[
        {'field': 'title', 'value': ' Senior Officer '},
        {'field': 'max_appointments_per_day', 'value': 4},
    ])

    result = update_my_profile(data, response, caller=_caller(rep), db=db)

    db.refresh(rep)
    assert response.status_code == 200
    assert result.success is True
    assert rep.title == 'Senior Officer'
    assert rep.max_appointments_per_day == 4


def test_update_my_profile_without_updates_is_422(db, schema_ready) -> None:
    rep = add_representative(db)
    response = Response()

    result = update_my_profile(UpdateProfileRequest(updates=[]), response, caller=_caller(rep), db=db)

    assert response.status_code == 422
    assert result.success is False


@pytest.mark.parametrize('call', ['directory', 'profile', 'update'])
def test_profile_routes_check_database_first(schema_unavailable, call) -> None:
    caller = CallerContext(user_id=1, email='rep@example.com', role='representative', representative_id=1)

    with pytest.raises(HTTPException) as exception_info:
        if call == 'directory':
            list_representatives(db=None)
        elif call == 'profile':
            get_my_profile(caller=caller, db=None)
        else:
            update_my_profile(
                UpdateProfileRequest(updates=[{'field': 'title', 'value': 'Officer'}]),
                Response(),
                caller=caller,
                db=None,
            )

    assert exception_info.value.status_code == 503
    assert exception_info.value.detail == DATABASE_UNAVAILABLE_DETAIL
