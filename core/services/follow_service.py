"""Follow service: public profiles, follower lists, user search."""

import logging

from core.models import PublicUser, UserSearchResult
from core.query_keys import FollowKeys, UserKeys, WishlistKeys
from core.services.base import BaseService

logger = logging.getLogger(__name__)

MIN_SEARCH_LENGTH = 2


class FollowService(BaseService):

    def get_public_profile(self, username: str) -> PublicUser:
        return self._query(
            FollowKeys.profile(username),
            lambda: PublicUser.model_validate(self.api.get(f"/users/{username}")),
        )

    def followers(self, username: str) -> list[PublicUser]:
        return self._query(
            FollowKeys.followers(username),
            lambda: [PublicUser.model_validate(u) for u in self.api.get(f"/users/{username}/followers") or []],
        )

    def following(self, username: str) -> list[PublicUser]:
        return self._query(
            FollowKeys.following(username),
            lambda: [PublicUser.model_validate(u) for u in self.api.get(f"/users/{username}/following") or []],
        )

    def search(self, query: str) -> list[UserSearchResult]:
        """Find users by name or username. Short queries never hit the network."""
        query = query.strip()
        if len(query) < MIN_SEARCH_LENGTH:
            return []
        return self._query(
            FollowKeys.search(query),
            lambda: [
                UserSearchResult.model_validate(u)
                for u in self.api.get("/users/search", params={"q": query}) or []
            ],
            stale_seconds=self.config.search_stale_seconds,
        )

    def follow(self, username: str) -> None:
        self._mutate(
            lambda: self.api.post(f"/users/{username}/follow"),
            self._invalidates(username),
        )
        logger.info(f"Followed {username}")

    def unfollow(self, username: str) -> None:
        self._mutate(
            lambda: self.api.delete(f"/users/{username}/follow"),
            self._invalidates(username),
        )
        logger.info(f"Unfollowed {username}")

    @staticmethod
    def _invalidates(username: str) -> list:
        # Every follow list and search result embeds isFollowing; own profile
        # carries the following count; the feed gains or loses lists
        return [
            FollowKeys.profile(username),
            FollowKeys.LISTS,
            UserKeys.profile(),
            WishlistKeys.following(),
        ]
