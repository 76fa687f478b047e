"""SQLAlchemy ORM models package."""

from safebyte.database import Base
from safebyte.models.restaurant import Restaurant
from safebyte.models.dish import Dish
from safebyte.models.profile import Profile
from safebyte.models.saved_item import SavedItem
from safebyte.models.feedback import Feedback

__all__ = ["Base", "Restaurant", "Dish", "Profile", "SavedItem", "Feedback"]
