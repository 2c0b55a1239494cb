from __future__ import annotations

import logging
from typing import Any, Iterable

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, aliased

from assetshare.core.access import is_visible, visible_to
from assetshare.core.constants import ANONYMOUS_DISPLAY_NAME
from assetshare.core.errors import InvalidDraftError
from assetshare.core.identifiers import parse_id, parse_ids, parse_principal
from assetshare.db.session import unit_of_work
from assetshare.models.category import CategoryItem
from assetshare.models.common import utcnow
from assetshare.models.inventory import Inventory
from assetshare.models.maintenance_plan import MaintenanceItem
from assetshare.models.profile import Profile
from assetshare.schemas.association import AssociationOut
from assetshare.services.common import groups_with, list_limit
from assetshare.services.enrichment import display_name


logger = logging.getLogger(__name__)


class AssociationManager:
    """Links between a parent (category or maintenance plan) and inventory items.

    Each link row carries its own sharable groups; listing checks those groups,
    never the parent's.
    """

    def __init__(self, model: Any, parent_attr: str) -> None:
        self.model = model
        self.parent_attr = parent_attr

    @property
    def parent_column(self) -> Any:
        return getattr(self.model, self.parent_attr)

    def _to_out(
        self,
        link: Any,
        item: Inventory | None,
        creator: Profile | None,
        updater: Profile | None,
    ) -> AssociationOut:
        return AssociationOut(
            id=link.id,
            parent_id=getattr(link, self.parent_attr),
            item_id=link.item_id,
            name=item.name if item else None,
            description=item.description if item else None,
            price=item.price if item else None,
            quantity=item.quantity if item else None,
            location=item.location if item else None,
            created_by=link.created_by,
            creator_name=display_name(creator) or ANONYMOUS_DISPLAY_NAME,
            created_at=link.created_at,
            updated_by=link.updated_by,
            updater_name=display_name(updater) or ANONYMOUS_DISPLAY_NAME,
            updated_at=link.updated_at,
            sharable_groups=link.sharable_groups,
        )

    def list_items(
        self,
        db: Session,
        principal: Any,
        parent_id: Any,
        *,
        limit: int | None = None,
    ) -> list[AssociationOut]:
        creator = aliased(Profile, name="creator")
        updater = aliased(Profile, name="updater")
        stmt = (
            select(self.model, Inventory, creator, updater)
            .join(Inventory, Inventory.id == self.model.item_id)
            .outerjoin(creator, creator.id == self.model.created_by)
            .outerjoin(updater, updater.id == self.model.updated_by)
            .where(
                self.parent_column == parse_id(parent_id),
                visible_to(self.model.sharable_groups, principal),
            )
            .order_by(self.model.updated_at.desc(), self.model.id)
            .limit(list_limit(limit))
            .execution_options(populate_existing=True)
        )
        # the link's groups gate the row; the item's own groups gate its fields
        return [
            self._to_out(link, item if is_visible(principal, item) else None, link_creator, link_updater)
            for link, item, link_creator, link_updater in db.execute(stmt).all()
        ]

    def add_items(
        self,
        db: Session,
        parent_id: Any,
        item_ids: Iterable[Any],
        actor: Any,
        groups: Iterable[Any] | None = None,
    ) -> list[AssociationOut]:
        """Link every item to the parent or none of them.

        Every item must be visible to the actor; otherwise ``InvalidDraftError``
        is raised and nothing is linked. Returns every link of the parent the
        actor can see, read after the insert.
        """

        actor_id = parse_principal(actor)
        parent = parse_id(parent_id)
        targets = parse_ids(item_ids)
        link_groups = groups_with(actor_id, groups)
        now = utcnow()
        with unit_of_work(db):
            visible = set(
                db.scalars(
                    select(Inventory.id).where(
                        Inventory.id.in_(targets),
                        visible_to(Inventory.sharable_groups, actor_id),
                    )
                )
            )
            unknown = [item_id for item_id in targets if item_id not in visible]
            if unknown:
                raise InvalidDraftError(f"unknown inventory items: {', '.join(map(str, unknown))}")
            for item_id in targets:
                db.add(
                    self.model(
                        **{self.parent_attr: parent},
                        item_id=item_id,
                        created_by=actor_id,
                        created_at=now,
                        updated_by=actor_id,
                        updated_at=now,
                        sharable_groups=list(link_groups),
                    )
                )
            db.flush()
        logger.info("linked %d items to %s %s", len(targets), self.model.__tablename__, parent)
        return self.list_items(db, actor_id, parent)

    def remove_items(self, db: Session, parent_id: Any, association_ids: Iterable[Any]) -> None:
        parent = parse_id(parent_id)
        targets = parse_ids(association_ids)
        if not targets:
            return
        with unit_of_work(db):
            result = db.execute(
                delete(self.model)
                .where(self.parent_column == parent, self.model.id.in_(targets))
                .execution_options(synchronize_session=False)
            )
        logger.info("removed %s links from %s %s", result.rowcount, self.model.__tablename__, parent)


category_items = AssociationManager(CategoryItem, "category_id")
maintenance_items = AssociationManager(MaintenanceItem, "maintenance_plan_id")
