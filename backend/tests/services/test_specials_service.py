from datetime import date

import pytest

from studio_booking.core.exceptions import NotFoundException, ValidationException
from studio_booking.schemas.specials import SpecialCreateRequest, SpecialUpdateRequest
from studio_booking.services.specials_service import SpecialsService


@pytest.fixture
def specials_service(db):
    return SpecialsService(db)


def _create(service, admin, **overrides):
    data = dict(
        title="New Year Intro Week",
        description="Unlimited classes for a week",
        discount_percentage=20,
        valid_from=date(2030, 1, 13),
        valid_until=date(2030, 1, 19),
    )
    data.update(overrides)
    return service.create_special(SpecialCreateRequest(**data), created_by=admin.id)


def test_current_special_is_the_one_covering_today(specials_service, admin_user):
    _create(specials_service, admin_user, title="Old", valid_from=date(2030, 1, 1), valid_until=date(2030, 1, 7))
    current = _create(specials_service, admin_user)

    assert specials_service.get_current_special(date(2030, 1, 15)).id == current.id
    assert specials_service.get_current_special(date(2030, 2, 1)) is None


def test_inactive_special_is_not_current(specials_service, admin_user):
    _create(specials_service, admin_user, is_active=False)

    assert specials_service.get_current_special(date(2030, 1, 15)) is None


def test_update_applies_only_given_fields(specials_service, admin_user):
    special = _create(specials_service, admin_user)

    updated = specials_service.update_special(special.id, SpecialUpdateRequest(title="Renamed"))

    assert updated.title == "Renamed"
    assert updated.discount_percentage == 20


def test_update_rejects_inverted_window(specials_service, admin_user):
    special = _create(specials_service, admin_user)

    with pytest.raises(ValidationException):
        specials_service.update_special(
            special.id, SpecialUpdateRequest(valid_until=date(2030, 1, 1))
        )


def test_create_rejects_inverted_window(admin_user):
    with pytest.raises(ValueError):
        SpecialCreateRequest(title="x", valid_from=date(2030, 1, 10), valid_until=date(2030, 1, 1))


def test_delete_then_missing(specials_service, admin_user):
    special = _create(specials_service, admin_user)

    specials_service.delete_special(special.id)

    assert specials_service.list_specials() == []
    with pytest.raises(NotFoundException):
        specials_service.delete_special(special.id)
    with pytest.raises(NotFoundException):
        specials_service.update_special(special.id, SpecialUpdateRequest(title="Gone"))
