"""Pydantic schemas package."""

from safebyte.schemas.profile import (
    AllergyAdd,
    DietTagAdd,
    ProfileOptions,
    ProfileUpdate,
    RemoteProfileRead,
    RemoteProfileWrite,
    UserProfile,
)
from safebyte.schemas.chat import ChatMessage, ChatRequest, ChatResponse, ErrorResponse
from safebyte.schemas.dish import (
    DishListResponse,
    DishResult,
    FeedbackCreate,
    FeedbackResponse,
    MapResponse,
    MapRestaurant,
    RestaurantSummary,
    SavedResponse,
)
from safebyte.schemas.ingest import IngestResult, MenuItemIn, MenuPayload, RestaurantIn

__all__ = [
    "UserProfile", "ProfileUpdate", "AllergyAdd", "DietTagAdd", "ProfileOptions",
    "RemoteProfileRead", "RemoteProfileWrite",
    "ChatMessage", "ChatRequest", "ChatResponse", "ErrorResponse",
    "DishResult", "DishListResponse", "RestaurantSummary", "MapRestaurant",
    "MapResponse", "FeedbackCreate", "FeedbackResponse", "SavedResponse",
    "RestaurantIn", "MenuItemIn", "MenuPayload", "IngestResult",
]
