import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError as DraftValidationError
from sqlalchemy import func, select
from sqlalchemy.exc import NoResultFound

from assetshare.core.errors import InvalidColumnError, InvalidDraftError, InvalidPrincipalError, StatusNotFoundError
from assetshare.db.session import caller_transaction
from assetshare.models.inventory import Inventory, UpdatableColumn
from assetshare.models.storage_location import StorageLocation
from assetshare.schemas.inventory import InventoryCreate, InventoryUpdate
from assetshare.services import inventory_service


def _count(db, model):
    return db.scalar(select(func.count()).select_from(model))


def test_drill_scenario(db, owner):
    draft = InventoryCreate(name="Drill", price=Decimal("49.99"), quantity=3, location="Garage")

    created = inventory_service.create_inventory(db, owner, draft)
    fetched = inventory_service.get_inventory(db, owner, created.id)

    assert fetched is not None
    assert fetched.name == "Drill"
    assert fetched.price == Decimal("49.99")
    assert fetched.quantity == 3
    assert fetched.location == "Garage"
    assert fetched.storage_location_id is not None
    assert fetched.creator_name == "umaster"
    assert fetched.updater_name == "umaster"
    assert fetched.sharable_groups == [owner]
    assert db.get(StorageLocation, fetched.storage_location_id).location == "Garage"


def test_create_then_get_round_trips_mutable_fields(db, owner):
    draft = InventoryCreate(
        name="Kayak",
        description="Two seats",
        price=Decimal("300.00"),
        barcode="123",
        sku="KY-2",
        color="yellow",
        quantity=1,
        bought_at="Outdoor store",
        status="general",
        min_weight=10,
        max_weight=30,
    )

    created = inventory_service.create_inventory(db, owner, draft)
    fetched = inventory_service.get_inventory(db, owner, created.id)

    assert fetched == created
    for field in ("name", "description", "price", "barcode", "sku", "color", "quantity", "bought_at", "min_weight", "max_weight"):
        assert getattr(fetched, field) == getattr(draft, field)
    assert fetched.status is not None
    assert fetched.status.name == "general"
    assert fetched.created_at is not None


def test_status_may_be_referenced_by_id(db, owner):
    general = inventory_service.create_inventory(db, owner, InventoryCreate(name="Rake", status="general"))

    by_id = inventory_service.create_inventory(db, owner, InventoryCreate(name="Hoe", status=str(general.status.id)))

    assert by_id.status.name == "general"


def test_unknown_status_is_rejected_before_insert(db, owner):
    with pytest.raises(StatusNotFoundError):
        inventory_service.create_inventory(db, owner, InventoryCreate(name="Saw", status="retired", location="Shed"))

    assert _count(db, Inventory) == 0
    assert _count(db, StorageLocation) == 0


def test_missing_status_is_allowed(db, owner):
    created = inventory_service.create_inventory(db, owner, InventoryCreate(name="Saw"))
    assert created.status is None
    assert created.status_id is None


def test_malformed_principal_is_rejected(db):
    with pytest.raises(InvalidPrincipalError):
        inventory_service.create_inventory(db, "someone", InventoryCreate(name="Saw"))
    assert _count(db, Inventory) == 0


def test_creator_is_always_in_groups(db, owner, outsider):
    created = inventory_service.create_inventory(db, owner, InventoryCreate(name="Tent", sharable_groups=[outsider]))
    assert created.sharable_groups == [owner, outsider]


def test_visibility_requires_group_membership(db, owner, outsider):
    created = inventory_service.create_inventory(db, owner, InventoryCreate(name="Tent"))

    assert inventory_service.get_inventory(db, outsider, created.id) is None
    assert inventory_service.get_inventory(db, outsider, uuid.uuid4()) is None
    assert inventory_service.list_inventories(db, outsider) == []


def test_shared_item_is_visible_and_editable_by_member(db, owner, outsider):
    created = inventory_service.create_inventory(db, owner, InventoryCreate(name="Tent", sharable_groups=[outsider]))

    updated = inventory_service.update_inventory(db, outsider, created.id, InventoryUpdate(name="Big tent", quantity=2))

    assert updated.name == "Big tent"
    assert updated.updated_by == outsider
    assert updated.updater_name == "Vic Outsider"
    assert updated.created_by == owner
    assert updated.sharable_groups == [owner, outsider]


def test_update_of_invisible_item_returns_none_and_changes_nothing(db, owner, outsider):
    created = inventory_service.create_inventory(db, owner, InventoryCreate(name="Tent"))

    assert inventory_service.update_inventory(db, outsider, created.id, InventoryUpdate(name="Stolen")) is None
    assert inventory_service.get_inventory(db, owner, created.id).name == "Tent"


def test_update_keeps_creator_when_groups_change(db, owner, outsider):
    created = inventory_service.create_inventory(db, owner, InventoryCreate(name="Tent", sharable_groups=[outsider]))

    updated = inventory_service.update_inventory(
        db, outsider, created.id, InventoryUpdate(name="Tent", sharable_groups=[outsider])
    )

    assert updated.sharable_groups == [owner, outsider]


def test_update_resolves_new_location(db, owner):
    created = inventory_service.create_inventory(db, owner, InventoryCreate(name="Bike", location="Garage"))

    updated = inventory_service.update_inventory(db, owner, created.id, InventoryUpdate(name="Bike", location="Shed"))

    assert updated.location == "Shed"
    assert updated.storage_location_id != created.storage_location_id
    assert _count(db, StorageLocation) == 2


def test_location_may_reference_existing_storage_location(db, owner):
    first = inventory_service.create_inventory(db, owner, InventoryCreate(name="Bike", location="Garage"))

    second = inventory_service.create_inventory(
        db, owner, InventoryCreate(name="Helmet", location=str(first.storage_location_id))
    )

    assert second.storage_location_id == first.storage_location_id
    assert second.location == "Garage"
    assert _count(db, StorageLocation) == 1


def test_returnable_fields_are_cleared_on_create_and_update(db, owner):
    due = datetime(2030, 1, 1, tzinfo=timezone.utc)
    created = inventory_service.create_inventory(
        db, owner, InventoryCreate(name="Projector", is_returnable=False, return_location="Office", return_datetime=due)
    )
    assert created.return_location is None
    assert created.return_datetime is None

    updated = inventory_service.update_inventory(
        db, owner, created.id, InventoryUpdate(name="Projector", is_returnable=False, return_notes="late")
    )
    assert updated.return_notes is None

    returnable = inventory_service.update_inventory(
        db, owner, created.id, InventoryUpdate(name="Projector", is_returnable=True, return_location="Office")
    )
    assert returnable.return_location == "Office"


@pytest.mark.parametrize(
    "fields",
    [
        {"min_weight": 10, "max_weight": 5},
        {"min_height": 3, "max_height": 1},
        {"price": Decimal("-1")},
        {"quantity": -2},
    ],
)
def test_inconsistent_drafts_are_rejected(fields):
    with pytest.raises(DraftValidationError):
        InventoryCreate(name="Box", **fields)
    with pytest.raises(DraftValidationError):
        InventoryUpdate(name="Box", **fields)


def test_column_update_changes_price(db, owner):
    created = inventory_service.create_inventory(db, owner, InventoryCreate(name="Drill", price=Decimal("49.99")))

    updated = inventory_service.update_inventory_column(db, owner, created.id, "price", Decimal("10.00"))

    assert updated.price == Decimal("10.00")
    assert updated.name == "Drill"


def test_column_update_changes_quantity(db, owner):
    created = inventory_service.create_inventory(db, owner, InventoryCreate(name="Screws", quantity=100))

    updated = inventory_service.update_inventory_column(db, owner, created.id, UpdatableColumn.QUANTITY, 80)

    assert updated.quantity == 80


def test_column_update_rejects_other_columns(db, owner):
    created = inventory_service.create_inventory(db, owner, InventoryCreate(name="Drill", description="cordless"))

    with pytest.raises(InvalidColumnError):
        inventory_service.update_inventory_column(db, owner, created.id, "description", "x")

    assert inventory_service.get_inventory(db, owner, created.id).description == "cordless"


@pytest.mark.parametrize(
    "column, value",
    [("price", "-5"), ("price", "abc"), ("quantity", -1), ("quantity", 1.5), ("quantity", True)],
)
def test_column_update_rejects_invalid_values(db, owner, column, value):
    created = inventory_service.create_inventory(db, owner, InventoryCreate(name="Drill", price=Decimal("1"), quantity=1))

    with pytest.raises(InvalidDraftError):
        inventory_service.update_inventory_column(db, owner, created.id, column, value)

    fetched = inventory_service.get_inventory(db, owner, created.id)
    assert fetched.price == Decimal("1")
    assert fetched.quantity == 1


def test_column_update_of_invisible_item_returns_none(db, owner, outsider):
    created = inventory_service.create_inventory(db, owner, InventoryCreate(name="Drill", quantity=1))

    assert inventory_service.update_inventory_column(db, outsider, created.id, "quantity", 9) is None
    assert inventory_service.get_inventory(db, owner, created.id).quantity == 1


def test_delete_is_idempotent_and_returns_input(db, owner):
    first = inventory_service.create_inventory(db, owner, InventoryCreate(name="One"))
    missing = uuid.uuid4()

    deleted = inventory_service.delete_inventories(db, owner, [first.id, missing])

    assert deleted == [first.id, missing]
    assert inventory_service.get_inventory(db, owner, first.id) is None
    assert inventory_service.get_inventory(db, owner, missing) is None
    assert inventory_service.delete_inventories(db, owner, [first.id, missing]) == [first.id, missing]


def test_delete_skips_rows_the_principal_cannot_see(db, owner, outsider):
    created = inventory_service.create_inventory(db, owner, InventoryCreate(name="Mine"))

    inventory_service.delete_inventories(db, outsider, [created.id])

    assert inventory_service.get_inventory(db, owner, created.id) is not None


def test_bulk_create_inserts_all_and_returns_own_list(db, owner):
    inventory_service.create_inventory(db, owner, InventoryCreate(name="Existing"))
    drafts = [InventoryCreate(name="Hammer", location="Shed"), InventoryCreate(name="Nails", quantity=500)]

    result = inventory_service.create_inventories(db, owner, drafts)

    assert sorted(item.name for item in result) == ["Existing", "Hammer", "Nails"]
    assert _count(db, Inventory) == 3


def test_bulk_create_is_all_or_nothing(db, owner):
    drafts = [InventoryCreate(name="Hammer", location="Shed"), InventoryCreate(name="Nails", status="missing")]

    with pytest.raises(StatusNotFoundError):
        inventory_service.create_inventories(db, owner, drafts)

    assert _count(db, Inventory) == 0
    assert _count(db, StorageLocation) == 0


def test_own_list_ignores_items_shared_by_others(db, owner, outsider):
    inventory_service.create_inventory(db, outsider, InventoryCreate(name="Theirs", sharable_groups=[owner]))
    inventory_service.create_inventory(db, owner, InventoryCreate(name="Mine"))

    assert [item.name for item in inventory_service.list_own_inventories(db, owner)] == ["Mine"]
    assert sorted(item.name for item in inventory_service.list_inventories(db, owner)) == ["Mine", "Theirs"]


def test_list_orders_by_update_and_honours_since_and_limit(db, owner):
    old = inventory_service.create_inventory(db, owner, InventoryCreate(name="Old"))
    new = inventory_service.create_inventory(db, owner, InventoryCreate(name="New"))
    stale = datetime.now(timezone.utc) - timedelta(days=30)
    db.execute(Inventory.__table__.update().where(Inventory.id == old.id).values(updated_at=stale))
    db.commit()

    assert [item.id for item in inventory_service.list_inventories(db, owner)] == [new.id, old.id]
    assert [item.id for item in inventory_service.list_inventories(db, owner, limit=1)] == [new.id]
    since = datetime.now(timezone.utc) - timedelta(days=1)
    assert [item.id for item in inventory_service.list_inventories(db, owner, since=since)] == [new.id]


def test_image_is_attached_best_effort(db, owner, store):
    with_image = inventory_service.create_inventory(db, owner, InventoryCreate(name="Lamp"))
    store.store(str(with_image.id), b"\x89PNG", content_type="image/png", filename="lamp.png")

    fetched = inventory_service.get_inventory(db, owner, with_image.id, store=store)
    without = inventory_service.create_inventory(db, owner, InventoryCreate(name="Chair"), store=store)

    assert fetched.image.content == b"\x89PNG"
    assert fetched.image.content_type == "image/png"
    assert without.image is None


def test_update_image_sets_reference_for_members_only(db, owner, outsider):
    created = inventory_service.create_inventory(db, owner, InventoryCreate(name="Lamp"))

    assert inventory_service.update_inventory_image(db, owner, created.id, str(created.id)) is True
    assert inventory_service.get_inventory(db, owner, created.id).associated_image_url == str(created.id)

    with pytest.raises(NoResultFound):
        inventory_service.update_inventory_image(db, outsider, created.id, "elsewhere")


def test_caller_transaction_groups_several_writes(db, owner):
    with pytest.raises(RuntimeError):
        with caller_transaction(db):
            inventory_service.create_inventory(db, owner, InventoryCreate(name="First", location="Shed"))
            inventory_service.create_inventory(db, owner, InventoryCreate(name="Second"))
            raise RuntimeError("abort")

    assert _count(db, Inventory) == 0
    assert _count(db, StorageLocation) == 0
