"""Core domain models."""

from core.models.user import (
    BirthDate, Identity, IdentityUpdate, ProfileUpdate,
    PublicUser, UserProfile, UserSearchResult,
)
from core.models.dependent import Dependent, DependentCreate, DependentUpdate, Relationship
from core.models.item import Item, ItemCreate, ItemUpdate, ItemType
from core.models.wishlist import Wishlist, WishlistCreate, WishlistUpdate, WishlistSharing
from core.models.reservation import Reservation, ReservationCreate, ReservationStatus
from core.models.conversation import Conversation, AnonymizedMessage
from core.normalize import PriceRange, Quantity

__all__ = [
    # User
    "BirthDate", "Identity", "IdentityUpdate", "ProfileUpdate",
    "PublicUser", "UserProfile", "UserSearchResult",
    # Dependent
    "Dependent", "DependentCreate", "DependentUpdate", "Relationship",
    # Item
    "Item", "ItemCreate", "ItemUpdate", "ItemType", "PriceRange", "Quantity",
    # Wishlist
    "Wishlist", "WishlistCreate", "WishlistUpdate", "WishlistSharing",
    # Reservation
    "Reservation", "ReservationCreate", "ReservationStatus",
    # Conversation
    "Conversation", "AnonymizedMessage",
]
