import pytest
from sqlalchemy import func, select

from assetshare.core.errors import InvalidPrincipalError
from assetshare.models.storage_location import StorageLocation
from assetshare.services.location_service import list_storage_locations, resolve_storage_location


def _location_count(db):
    return db.scalar(select(func.count()).select_from(StorageLocation))


def test_new_text_creates_exactly_one_location(db, owner):
    resolved = resolve_storage_location(db, "  Garage ", owner)
    db.commit()

    assert resolved.location == "Garage"
    assert _location_count(db) == 1
    assert db.get(StorageLocation, resolved.id).created_by == owner


def test_same_text_twice_creates_two_rows(db, owner):
    first = resolve_storage_location(db, "Garage", owner)
    second = resolve_storage_location(db, "Garage", owner)
    db.commit()

    assert first.id != second.id
    assert _location_count(db) == 2


def test_known_id_is_reused_with_canonical_text(db, owner):
    existing = resolve_storage_location(db, "Basement shelf", owner)
    db.commit()

    resolved = resolve_storage_location(db, str(existing.id), owner)

    assert resolved.id == existing.id
    assert resolved.location == "Basement shelf"
    assert _location_count(db) == 1


@pytest.mark.parametrize("raw", [None, "", "   "])
def test_blank_location_resolves_to_nothing(db, owner, raw):
    assert resolve_storage_location(db, raw, owner) is None
    assert _location_count(db) == 0


def test_malformed_owner_is_rejected(db):
    with pytest.raises(InvalidPrincipalError):
        resolve_storage_location(db, "Garage", "not-a-principal")
    assert _location_count(db) == 0


def test_resolver_never_commits(db, owner):
    resolve_storage_location(db, "Attic", owner)
    db.rollback()

    assert _location_count(db) == 0


def test_list_storage_locations_is_sorted(db, owner):
    for text in ("Shed", "Attic", "Garage"):
        resolve_storage_location(db, text, owner)
    db.commit()

    assert [row.location for row in list_storage_locations(db)] == ["Attic", "Garage", "Shed"]
    assert len(list_storage_locations(db, limit=2)) == 2
