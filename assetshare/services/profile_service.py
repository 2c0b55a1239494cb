from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session, aliased

from assetshare.core.access import visible_to
from assetshare.core.identifiers import parse_id, parse_principal
from assetshare.db.session import unit_of_work
from assetshare.models.category import Category
from assetshare.models.common import utcnow
from assetshare.models.favourite import FavouriteItem
from assetshare.models.maintenance_plan import MaintenancePlan
from assetshare.models.profile import Profile
from assetshare.models.status import Status
from assetshare.schemas.profile import FavouriteCreate, FavouriteOut, ProfileOut, ProfileUpdate
from assetshare.services.common import list_limit, load_visible


logger = logging.getLogger(__name__)


def list_profiles(db: Session) -> list[ProfileOut]:
    profiles = db.scalars(select(Profile).order_by(Profile.username, Profile.id))
    return [ProfileOut.model_validate(profile) for profile in profiles]


def get_profile(db: Session, profile_id: Any) -> ProfileOut | None:
    profile = db.get(Profile, parse_id(profile_id), populate_existing=True)
    if profile is None:
        return None
    return ProfileOut.model_validate(profile)


def update_profile(db: Session, principal: Any, draft: ProfileUpdate) -> ProfileOut | None:
    """Apply the fields set on ``draft`` to the principal's own profile."""

    profile_id = parse_principal(principal)
    with unit_of_work(db):
        profile = db.get(Profile, profile_id)
        if profile is None:
            return None
        for key, value in draft.model_dump(exclude_unset=True).items():
            setattr(profile, key, value)
        profile.updated_at = utcnow()
        db.flush()
    logger.info("updated profile %s", profile_id)
    return get_profile(db, profile_id)


def update_profile_avatar(db: Session, principal: Any, image_ref: str) -> bool:
    """Point the principal's own profile at ``image_ref``.

    Raises ``NoResultFound`` when the principal has no profile row.
    """

    profile_id = parse_principal(principal)
    with unit_of_work(db):
        db.execute(
            update(Profile)
            .where(Profile.id == profile_id)
            .values(avatar_url=image_ref, updated_at=utcnow())
            .returning(Profile.id)
            .execution_options(synchronize_session=False)
        ).scalar_one()
    logger.info("updated avatar of profile %s", profile_id)
    return True


def list_favourites(db: Session, principal: Any, *, limit: int | None = None) -> list[FavouriteOut]:
    category_status = aliased(Status, name="category_status")
    plan_status = aliased(Status, name="plan_status")
    stmt = (
        select(FavouriteItem, Category.name, category_status.name, MaintenancePlan.name, plan_status.name)
        .outerjoin(Category, Category.id == FavouriteItem.category_id)
        .outerjoin(category_status, category_status.id == Category.status_id)
        .outerjoin(MaintenancePlan, MaintenancePlan.id == FavouriteItem.maintenance_plan_id)
        .outerjoin(plan_status, plan_status.id == MaintenancePlan.status_id)
        .where(visible_to(FavouriteItem.sharable_groups, principal))
        .order_by(FavouriteItem.updated_at.desc(), FavouriteItem.id)
        .limit(list_limit(limit))
    )
    return [
        FavouriteOut(
            id=favourite.id,
            category_id=favourite.category_id,
            category_name=category_name,
            category_status=category_status_name,
            maintenance_plan_id=favourite.maintenance_plan_id,
            maintenance_plan_name=plan_name,
            maintenance_plan_status=plan_status_name,
        )
        for favourite, category_name, category_status_name, plan_name, plan_status_name in db.execute(stmt).all()
    ]


def save_favourite(db: Session, principal: Any, draft: FavouriteCreate) -> list[FavouriteOut] | None:
    """Bookmark a category or maintenance plan; ``None`` if the target is not visible."""

    owner_id = parse_principal(principal)
    targets = ((Category, draft.category_id), (MaintenancePlan, draft.maintenance_plan_id))
    for model, target_id in targets:
        if target_id is not None and load_visible(db, model, owner_id, target_id) is None:
            return None

    now = utcnow()
    with unit_of_work(db):
        db.add(
            FavouriteItem(
                category_id=draft.category_id,
                maintenance_plan_id=draft.maintenance_plan_id,
                created_by=owner_id,
                created_at=now,
                updated_by=owner_id,
                updated_at=now,
                sharable_groups=[owner_id],
            )
        )
        db.flush()
    return list_favourites(db, owner_id)


def remove_favourite(db: Session, principal: Any, favourite_id: Any) -> Any:
    principal_id = parse_principal(principal)
    target = parse_id(favourite_id)
    with unit_of_work(db):
        db.execute(
            delete(FavouriteItem)
            .where(FavouriteItem.id == target, visible_to(FavouriteItem.sharable_groups, principal_id))
            .execution_options(synchronize_session=False)
        )
    return favourite_id
