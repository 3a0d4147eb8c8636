"""
Cache key factories.

Keys are tuples shaped (family, "list" | "detail", *discriminators). Every
discriminator that changes what the server returns is part of the key, so two
different filters never share an entry. Invalidating a shorter tuple fans out
to every key that starts with it.
"""

from uuid import UUID

QueryKey = tuple[str, ...]


def _s(value: UUID | str) -> str:
    return str(value)


class WishlistKeys:
    ALL: QueryKey = ("wishlists",)

    @staticmethod
    def lists() -> QueryKey:
        return ("wishlists", "list")

    @staticmethod
    def mine() -> QueryKey:
        return ("wishlists", "list", "mine")

    @staticmethod
    def following() -> QueryKey:
        return ("wishlists", "list", "following")

    @staticmethod
    def details() -> QueryKey:
        return ("wishlists", "detail")

    @staticmethod
    def detail(wishlist_id: UUID | str) -> QueryKey:
        return ("wishlists", "detail", _s(wishlist_id))


class PublicWishlistKeys:
    ALL: QueryKey = ("public-wishlists",)

    @staticmethod
    def detail(token: str) -> QueryKey:
        return ("public-wishlists", "detail", token)


class DependentKeys:
    ALL: QueryKey = ("dependents",)

    @staticmethod
    def mine() -> QueryKey:
        return ("dependents", "list", "mine")

    @staticmethod
    def detail(dependent_id: UUID | str) -> QueryKey:
        return ("dependents", "detail", _s(dependent_id))


class DependentWishlistKeys:
    ALL: QueryKey = ("dependent-wishlists",)

    @staticmethod
    def list(dependent_id: UUID | str) -> QueryKey:
        return ("dependent-wishlists", "list", _s(dependent_id))


class ReservationKeys:
    ALL: QueryKey = ("reservations",)

    @staticmethod
    def mine() -> QueryKey:
        return ("reservations", "list", "mine")

    @staticmethod
    def detail(reservation_id: UUID | str) -> QueryKey:
        return ("reservations", "detail", _s(reservation_id))


class UserKeys:
    ALL: QueryKey = ("user",)

    @staticmethod
    def me() -> QueryKey:
        return ("user", "detail", "me")

    @staticmethod
    def profile() -> QueryKey:
        return ("user", "detail", "profile")


class FollowKeys:
    """Social graph: public profiles, follower lists, search."""

    ALL: QueryKey = ("follow",)
    LISTS: QueryKey = ("follow", "list")

    @staticmethod
    def profile(username: str) -> QueryKey:
        return ("follow", "detail", "profile", username)

    @staticmethod
    def followers(username: str) -> QueryKey:
        return ("follow", "list", "followers", username)

    @staticmethod
    def following(username: str) -> QueryKey:
        return ("follow", "list", "following", username)

    @staticmethod
    def search(query: str) -> QueryKey:
        return ("follow", "list", "search", query)


class ConversationKeys:
    ALL: QueryKey = ("conversations",)

    @staticmethod
    def messages(conversation_id: UUID | str) -> QueryKey:
        return ("conversations", "list", "messages", _s(conversation_id))
