from assetshare.models.category import Category, CategoryItem
from assetshare.models.favourite import FavouriteItem
from assetshare.models.inventory import Inventory, UpdatableColumn
from assetshare.models.maintenance_plan import MaintenanceItem, MaintenancePlan
from assetshare.models.profile import Profile
from assetshare.models.status import Status
from assetshare.models.storage_location import StorageLocation

__all__ = [
    "Category",
    "CategoryItem",
    "FavouriteItem",
    "Inventory",
    "UpdatableColumn",
    "MaintenanceItem",
    "MaintenancePlan",
    "Profile",
    "Status",
    "StorageLocation",
]
