from datetime import datetime, timedelta, timezone
from decimal import Decimal

from assetshare.models.inventory import Inventory
from assetshare.schemas.category import CategoryCreate
from assetshare.schemas.inventory import InventoryCreate
from assetshare.services import category_service, inventory_service
from assetshare.services.report_service import compute_report


def _since():
    return datetime.now(timezone.utc) - timedelta(hours=1)


def test_valuation_and_category_cost(db, owner):
    t0 = _since()
    cheap = inventory_service.create_inventory(db, owner, InventoryCreate(name="Cheap", price=Decimal("10")))
    inventory_service.create_inventory(db, owner, InventoryCreate(name="Pricey", price=Decimal("15")))
    category = category_service.create_category(db, owner, CategoryCreate(name="Tools", status="general"))
    category_service.add_category_items(db, owner, category.id, [cheap.id])

    report = compute_report(db, owner, t0)

    assert report.item_valuation == Decimal("25")
    assert report.total_category_items_cost == Decimal("10")
    assert report.selected_time_range == t0


def test_item_in_several_categories_is_counted_once(db, owner):
    item = inventory_service.create_inventory(db, owner, InventoryCreate(name="Drill", price=Decimal("20")))
    for name in ("Tools", "Garage"):
        category = category_service.create_category(db, owner, CategoryCreate(name=name, status="general"))
        category_service.add_category_items(db, owner, category.id, [item.id])

    report = compute_report(db, owner, _since())

    assert report.total_category_items_cost == Decimal("20")


def test_empty_report_is_zero(db, owner, outsider):
    inventory_service.create_inventory(db, owner, InventoryCreate(name="Hidden", price=Decimal("99")))

    report = compute_report(db, outsider, _since())

    assert report.item_valuation == Decimal("0")
    assert report.total_category_items_cost == Decimal("0")


def test_window_and_overdue_items(db, owner):
    t0 = _since()
    due = datetime.now(timezone.utc) + timedelta(days=2)
    stale = inventory_service.create_inventory(
        db,
        owner,
        InventoryCreate(name="Borrowed", price=Decimal("7"), is_returnable=True, return_datetime=due),
    )
    db.execute(
        Inventory.__table__.update()
        .where(Inventory.id == stale.id)
        .values(updated_at=datetime.now(timezone.utc) - timedelta(days=10))
    )
    db.commit()

    assert compute_report(db, owner, t0).item_valuation == Decimal("0")
    assert compute_report(db, owner, t0, include_overdue=True).item_valuation == Decimal("7")
