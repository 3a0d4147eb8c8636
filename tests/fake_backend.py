"""
Stateful stand-in for the wishlist REST API, served through `responses`.

One callback per HTTP method is registered on a catch-all URL pattern and
requests are routed here, so the whole suite runs against the real ApiClient
and requests stack without a server. State lives in plain dicts; tests seed
users and wishlists directly and inspect `calls` to assert what went over the
wire.
"""

import json
import re
import uuid
from dataclasses import dataclass
from typing import Any, Callable
from urllib.parse import parse_qs, urlsplit

import responses

METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")


@dataclass
class Call:
    method: str
    path: str
    body: Any
    user_id: str | None
    authorization: str | None


@dataclass
class _Failure:
    method: str
    pattern: re.Pattern
    status: int | None
    body: Any
    exception: Exception | None
    times: int


class HttpError(Exception):
    def __init__(self, status: int, message: Any, error: str = "Error"):
        self.status = status
        self.message = message
        self.error = error


def _new_id() -> str:
    return uuid.uuid4().hex[:24]


def _now() -> str:
    return "2026-01-15T12:00:00.000Z"


class FakeBackend:
    """In-memory wishlist backend."""

    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip("/")
        self.users: dict[str, dict] = {}
        self.passwords: dict[str, str] = {}
        self.tokens: dict[str, str] = {}
        self.dependents: dict[str, dict] = {}
        self.wishlists: dict[str, dict] = {}
        self.reservations: dict[str, dict] = {}
        self.follows: set[tuple[str, str]] = set()
        self.conversations: dict[str, dict] = {}
        self.messages: dict[str, list[dict]] = {}
        self.recovery_codes: dict[str, str] = {}
        self.calls: list[Call] = []
        self._failures: list[_Failure] = []
        self._routes: list[tuple[str, re.Pattern, Callable]] = []
        self._build_routes()

    # -------------------------------------------------------------------------
    # Wiring
    # -------------------------------------------------------------------------

    def register(self, rsps: responses.RequestsMock) -> None:
        pattern = re.compile(re.escape(self.base_url) + r"/.*")
        for method in METHODS:
            rsps.add_callback(method, pattern, callback=self._handle)

    def fail_next(
        self,
        method: str,
        path_regex: str,
        status: int | None = None,
        body: Any = None,
        exception: Exception | None = None,
        times: int = 1,
    ) -> None:
        """Make the next matching request(s) fail with a status or raise."""
        self._failures.append(
            _Failure(method, re.compile(path_regex + r"$"), status, body, exception, times)
        )

    def calls_to(self, method: str, path_regex: str) -> list[Call]:
        pattern = re.compile(path_regex + r"$")
        return [c for c in self.calls if c.method == method and pattern.match(c.path)]

    # -------------------------------------------------------------------------
    # Seeding
    # -------------------------------------------------------------------------

    def seed_user(
        self,
        name: str,
        email: str | None = None,
        password: str = "secret-password",
        username: str | None = None,
    ) -> dict:
        user_id = _new_id()
        username = username or name.lower().replace(" ", "")
        user = {
            "id": user_id,
            "name": name,
            "email": email or f"{username}@example.com",
            "username": username,
            "emailVerified": True,
            "bio": None,
            "avatarUrl": None,
            "language": "en",
            "createdAt": _now(),
            "updatedAt": _now(),
        }
        self.users[user_id] = user
        self.passwords[user_id] = password
        return user

    def issue_token(self, user_id: str) -> str:
        token = f"token-{uuid.uuid4().hex}"
        self.tokens[token] = user_id
        return token

    def revoke_tokens(self, user_id: str) -> None:
        for token in [t for t, uid in self.tokens.items() if uid == user_id]:
            del self.tokens[token]

    def seed_wishlist(self, owner_id: str, title: str = "Wishlist", items: list[dict] | None = None,
                      is_public: bool = False) -> dict:
        wishlist = {
            "id": _new_id(),
            "title": title,
            "description": None,
            "ownerId": owner_id,
            "isPublic": is_public,
            "sharing": {"isPublic": is_public, "publicLinkToken": uuid.uuid4().hex if is_public else None},
            "items": [],
            "deleted": False,
            "createdAt": _now(),
            "updatedAt": _now(),
        }
        for raw in items or []:
            wishlist["items"].append({"id": _new_id(), "itemType": "SPECIFIC_PRODUCT", **raw})
        self.wishlists[wishlist["id"]] = wishlist
        return wishlist

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def _handle(self, request):
        parts = urlsplit(request.url)
        path = parts.path
        query = {k: v[0] for k, v in parse_qs(parts.query).items()}
        body = None
        if request.body:
            raw = request.body.decode() if isinstance(request.body, bytes) else request.body
            body = json.loads(raw)

        authorization = request.headers.get("Authorization")
        user_id = None
        if authorization and authorization.startswith("Bearer "):
            user_id = self.tokens.get(authorization[len("Bearer "):])

        self.calls.append(Call(request.method, path, body, user_id, authorization))

        for failure in self._failures:
            if failure.method == request.method and failure.pattern.match(path) and failure.times > 0:
                failure.times -= 1
                if failure.exception is not None:
                    return (0, {}, failure.exception)
                return self._respond(failure.status, failure.body)

        for method, pattern, handler in self._routes:
            if method != request.method:
                continue
            match = pattern.match(path)
            if match is None:
                continue
            try:
                status, payload = handler(user_id, body or {}, query, *match.groups())
            except HttpError as e:
                return self._respond(e.status, {"statusCode": e.status, "message": e.message, "error": e.error})
            return self._respond(status, payload)

        return self._respond(404, {"statusCode": 404, "message": f"Cannot {request.method} {path}"})

    @staticmethod
    def _respond(status: int, payload: Any):
        if payload is None:
            return (status, {}, "")
        return (status, {"Content-Type": "application/json"}, json.dumps(payload))

    def _route(self, method: str, template: str, handler: Callable) -> None:
        regex = "^" + re.sub(r":(\w+)", r"([^/]+)", template) + "$"
        self._routes.append((method, re.compile(regex), handler))

    def _build_routes(self) -> None:
        r = self._route
        # Auth
        r("POST", "/auth/login", self._login)
        r("POST", "/auth/register", self._register)
        r("POST", "/auth/logout", self._logout)
        r("POST", "/auth/change-password", self._change_password)
        r("POST", "/auth/forgot-password", self._forgot_password)
        r("POST", "/auth/reset-password", self._reset_password)
        r("POST", "/auth/refresh", self._refresh)
        # Identity
        r("GET", "/users/me", self._get_me)
        r("PUT", "/users/me", self._put_me)
        r("GET", "/users/me/profile", self._get_profile)
        r("PUT", "/users/profile", self._put_profile)
        r("PUT", "/users/me/language", self._put_language)
        r("GET", "/users/search", self._search)
        # Dependents
        r("GET", "/users/me/dependents", self._list_dependents)
        r("POST", "/users/me/dependents", self._create_dependent)
        r("GET", "/users/dependents/:id", self._get_dependent)
        r("DELETE", "/users/dependents/:id", self._delete_dependent)
        r("POST", "/users/dependents/:id/add-guardian", self._add_guardian)
        r("DELETE", "/users/dependents/:id/guardianship", self._remove_guardian)
        # Dependent wishlists and items
        r("GET", "/users/dependents/:id/wishlists", self._list_dependent_wishlists)
        r("POST", "/users/dependents/:id/wishlists", self._create_dependent_wishlist)
        r("PUT", "/users/dependents/:id/wishlists/:wid", self._update_dependent_wishlist)
        r("DELETE", "/users/dependents/:id/wishlists/:wid", self._soft_delete_dependent_wishlist)
        r("DELETE", "/users/dependents/:id/wishlists/:wid/permanent", self._hard_delete_dependent_wishlist)
        r("POST", "/users/dependents/:id/wishlists/:wid/restore", self._restore_dependent_wishlist)
        r("POST", "/users/dependents/:id/wishlists/:wid/items", self._create_dependent_item)
        r("PUT", "/users/dependents/:id/items/:iid", self._update_dependent_item)
        r("DELETE", "/users/dependents/:id/items/:iid", self._delete_dependent_item)
        r("PUT", "/users/dependents/:id/items/:iid/quantity", self._dependent_item_quantity)
        r("POST", "/users/dependents/:id/items/:iid/mark-received", self._dependent_item_received)
        # Dependent update shares the /users/:id shape
        r("PUT", "/users/:id", self._update_dependent)
        # Social
        r("GET", "/users/:username", self._public_profile)
        r("GET", "/users/:username/followers", self._followers)
        r("GET", "/users/:username/following", self._following)
        r("POST", "/users/:username/follow", self._follow)
        r("DELETE", "/users/:username/follow", self._unfollow)
        # Wishlists
        r("GET", "/wishlists/mine", self._my_wishlists)
        r("GET", "/wishlists/following", self._following_wishlists)
        r("GET", "/wishlists/:id", self._get_wishlist)
        r("POST", "/wishlists", self._create_wishlist)
        r("PUT", "/wishlists/:id", self._update_wishlist)
        r("DELETE", "/wishlists/:id", self._delete_wishlist)
        r("PATCH", "/wishlists/:id/sharing", self._update_sharing)
        r("GET", "/public/wishlists/:token", self._public_wishlist)
        # Items
        r("POST", "/wishlists/:wid/items", self._add_item)
        r("PUT", "/wishlists/:wid/items/:iid", self._update_item_in_wishlist)
        r("DELETE", "/wishlists/:wid/items/:iid", self._remove_item_from_wishlist)
        r("PUT", "/items/:iid", self._update_item)
        r("PATCH", "/items/:iid/quantity", self._item_quantity)
        r("DELETE", "/items/:iid", self._delete_item)
        r("POST", "/items/:iid/mark-as-received", self._item_received)
        # Reservations
        r("POST", "/reservations", self._create_reservation)
        r("GET", "/reservations/mine", self._my_reservations)
        r("GET", "/reservations/:id", self._get_reservation)
        r("PATCH", "/reservations/:id", self._update_reservation)
        r("POST", "/reservations/:id/confirm-purchase", self._confirm_reservation)
        r("DELETE", "/reservations/:id", self._cancel_reservation)
        # Conversations
        r("POST", "/conversations/items/:iid/start", self._start_conversation)
        r("GET", "/conversations/:id/messages", self._list_messages)
        r("POST", "/conversations/:id/messages", self._send_message)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _auth(user_id: str | None) -> str:
        if user_id is None:
            raise HttpError(401, "Unauthorized", "Unauthorized")
        return user_id

    def _identity(self, user_id: str) -> dict:
        user = self.users[user_id]
        keys = ("id", "name", "email", "emailVerified", "birthDate", "language", "createdAt", "updatedAt")
        return {k: user[k] for k in keys if k in user}

    def _guarded_dependent(self, user_id: str, dependent_id: str) -> dict:
        dependent = self.dependents.get(dependent_id)
        if dependent is None or user_id not in (dependent["guardianId"], dependent.get("secondGuardianId")):
            raise HttpError(404, "Dependent not found", "Not Found")
        return dependent

    def _can_manage(self, user_id: str, owner_id: str) -> bool:
        if owner_id == user_id:
            return True
        dependent = self.dependents.get(owner_id)
        return dependent is not None and user_id in (dependent["guardianId"], dependent.get("secondGuardianId"))

    def _managed_wishlist(self, user_id: str, wishlist_id: str) -> dict:
        wishlist = self.wishlists.get(wishlist_id)
        if wishlist is None or wishlist["deleted"]:
            raise HttpError(404, "Wishlist not found", "Not Found")
        if not self._can_manage(user_id, wishlist["ownerId"]):
            raise HttpError(403, "You cannot modify this wishlist", "Forbidden")
        return wishlist

    def _find_item(self, item_id: str) -> tuple[dict, dict]:
        for wishlist in self.wishlists.values():
            for item in wishlist["items"]:
                if item["id"] == item_id:
                    return wishlist, item
        raise HttpError(404, "Item not found", "Not Found")

    def _managed_item(self, user_id: str, item_id: str) -> tuple[dict, dict]:
        wishlist, item = self._find_item(item_id)
        if not self._can_manage(user_id, wishlist["ownerId"]):
            raise HttpError(403, "You cannot modify this item", "Forbidden")
        return wishlist, item

    @staticmethod
    def _view(wishlist: dict) -> dict:
        return {k: v for k, v in wishlist.items() if k != "deleted"}

    @staticmethod
    def _apply_item_fields(item: dict, body: dict) -> None:
        for key in ("title", "description", "price", "currency", "link", "imageUrl", "itemType", "notes"):
            if key in body:
                item[key] = body[key]
        if "quantity" in body:
            current = item.get("quantity") if isinstance(item.get("quantity"), dict) else {}
            item["quantity"] = {**current, "desired": body["quantity"]["desired"]}

    def _new_item(self, body: dict) -> dict:
        if not body.get("title"):
            raise HttpError(400, ["title should not be empty"], "Bad Request")
        item = {"id": _new_id(), "itemType": "SPECIFIC_PRODUCT", "quantity": {"desired": 1}}
        self._apply_item_fields(item, body)
        return item

    def _public_user(self, viewer_id: str | None, user: dict) -> dict:
        username = user["username"]
        return {
            "id": user["id"],
            "username": username,
            "name": user["name"],
            "bio": user.get("bio"),
            "avatarUrl": user.get("avatarUrl"),
            "isFollowing": (viewer_id, username) in self.follows,
            "followersCount": sum(1 for _, followee in self.follows if followee == username),
            "followingCount": sum(1 for follower, _ in self.follows if follower == user["id"]),
            "publicWishlistsCount": sum(
                1 for w in self.wishlists.values()
                if w["ownerId"] == user["id"] and w["isPublic"] and not w["deleted"]
            ),
        }

    def _user_by_username(self, username: str) -> dict:
        for user in self.users.values():
            if user["username"] == username:
                return user
        raise HttpError(404, "User not found", "Not Found")

    # -------------------------------------------------------------------------
    # Auth
    # -------------------------------------------------------------------------

    def _login(self, user_id, body, query):
        for uid, user in self.users.items():
            if body.get("login") in (user["email"], user["username"]):
                if self.passwords[uid] == body.get("password"):
                    return 200, {"accessToken": self.issue_token(uid), "user": self._identity(uid)}
        raise HttpError(401, "Invalid credentials", "Unauthorized")

    def _register(self, user_id, body, query):
        if any(u["email"] == body["email"] for u in self.users.values()):
            raise HttpError(409, "Email already registered", "Conflict")
        user = self.seed_user(body["name"], email=body["email"], password=body["password"])
        user["emailVerified"] = False
        return 201, self._identity(user["id"])

    def _logout(self, user_id, body, query):
        self.revoke_tokens(self._auth(user_id))
        return 200, {"message": "Logged out"}

    def _change_password(self, user_id, body, query):
        uid = self._auth(user_id)
        if self.passwords[uid] != body.get("oldPassword"):
            raise HttpError(400, "Current password is incorrect", "Bad Request")
        self.passwords[uid] = body["newPassword"]
        return 200, {"message": "Password changed"}

    def _forgot_password(self, user_id, body, query):
        self.recovery_codes[body["email"]] = "123456"
        return 200, {"message": "If the email exists, a code was sent"}

    def _reset_password(self, user_id, body, query):
        if self.recovery_codes.get(body["email"]) != body.get("recoveryCode"):
            raise HttpError(400, "Invalid recovery code", "Bad Request")
        for uid, user in self.users.items():
            if user["email"] == body["email"]:
                self.passwords[uid] = body["newPassword"]
        del self.recovery_codes[body["email"]]
        return 200, {"message": "Password reset"}

    def _refresh(self, user_id, body, query):
        uid = self._auth(user_id)
        return 200, {"accessToken": self.issue_token(uid)}

    # -------------------------------------------------------------------------
    # Identity
    # -------------------------------------------------------------------------

    def _get_me(self, user_id, body, query):
        return 200, self._identity(self._auth(user_id))

    def _put_me(self, user_id, body, query):
        uid = self._auth(user_id)
        self.users[uid].update({k: v for k, v in body.items() if k in ("name", "birthDate")})
        return 200, self._identity(uid)

    def _get_profile(self, user_id, body, query):
        uid = self._auth(user_id)
        user = self.users[uid]
        return 200, {
            **self._public_user(uid, user),
            "email": user["email"],
            "isEmailVerified": user["emailVerified"],
        }

    def _put_profile(self, user_id, body, query):
        uid = self._auth(user_id)
        self.users[uid].update({k: v for k, v in body.items() if k in ("name", "username", "bio", "avatarUrl")})
        return self._get_profile(uid, {}, {})

    def _put_language(self, user_id, body, query):
        uid = self._auth(user_id)
        self.users[uid]["language"] = body["language"]
        return 200, {"language": body["language"]}

    def _search(self, user_id, body, query):
        uid = self._auth(user_id)
        q = query.get("q", "").lower()
        results = [
            {
                "id": u["id"], "username": u["username"], "name": u["name"],
                "avatarUrl": u.get("avatarUrl"), "isFollowing": (uid, u["username"]) in self.follows,
            }
            for u in self.users.values()
            if u["id"] != uid and (q in u["name"].lower() or q in u["username"].lower())
        ]
        return 200, results

    # -------------------------------------------------------------------------
    # Dependents
    # -------------------------------------------------------------------------

    def _list_dependents(self, user_id, body, query):
        uid = self._auth(user_id)
        return 200, [
            d for d in self.dependents.values()
            if uid in (d["guardianId"], d.get("secondGuardianId"))
        ]

    def _create_dependent(self, user_id, body, query):
        uid = self._auth(user_id)
        dependent = {
            "id": _new_id(),
            "name": body["fullName"],
            "birthDate": body.get("birthDate"),
            "relationship": body["relationship"],
            "guardianId": uid,
            "guardianName": self.users[uid]["name"],
            "secondGuardianId": None,
            "secondGuardianName": None,
        }
        self.dependents[dependent["id"]] = dependent
        return 201, dependent

    def _get_dependent(self, user_id, body, query, dependent_id):
        return 200, self._guarded_dependent(self._auth(user_id), dependent_id)

    def _update_dependent(self, user_id, body, query, dependent_id):
        dependent = self._guarded_dependent(self._auth(user_id), dependent_id)
        dependent.update({k: v for k, v in body.items() if k in ("name", "birthDate", "relationship")})
        return 200, dependent

    def _delete_dependent(self, user_id, body, query, dependent_id):
        self._guarded_dependent(self._auth(user_id), dependent_id)
        del self.dependents[dependent_id]
        for wishlist in self.wishlists.values():
            if wishlist["ownerId"] == dependent_id:
                wishlist["deleted"] = True
        return 204, None

    def _add_guardian(self, user_id, body, query, dependent_id):
        dependent = self._guarded_dependent(self._auth(user_id), dependent_id)
        guardian_id = body.get("guardianId")
        if guardian_id not in self.users:
            raise HttpError(404, "User not found", "Not Found")
        if guardian_id == dependent["guardianId"]:
            raise HttpError(400, "User is already the primary guardian", "Bad Request")
        if dependent.get("secondGuardianId"):
            raise HttpError(409, "Dependent already has a second guardian", "Conflict")
        dependent["secondGuardianId"] = guardian_id
        dependent["secondGuardianName"] = self.users[guardian_id]["name"]
        return 200, dependent

    def _remove_guardian(self, user_id, body, query, dependent_id):
        dependent = self._guarded_dependent(self._auth(user_id), dependent_id)
        dependent["secondGuardianId"] = None
        dependent["secondGuardianName"] = None
        return 200, dependent

    # -------------------------------------------------------------------------
    # Dependent wishlists
    # -------------------------------------------------------------------------

    def _list_dependent_wishlists(self, user_id, body, query, dependent_id):
        self._guarded_dependent(self._auth(user_id), dependent_id)
        return 200, [
            self._view(w) for w in self.wishlists.values()
            if w["ownerId"] == dependent_id and not w["deleted"]
        ]

    def _create_dependent_wishlist(self, user_id, body, query, dependent_id):
        self._guarded_dependent(self._auth(user_id), dependent_id)
        wishlist = self.seed_wishlist(dependent_id, title=body["title"])
        wishlist["description"] = body.get("description")
        return 201, self._view(wishlist)

    def _update_dependent_wishlist(self, user_id, body, query, dependent_id, wishlist_id):
        self._guarded_dependent(self._auth(user_id), dependent_id)
        wishlist = self._managed_wishlist(user_id, wishlist_id)
        wishlist.update({k: v for k, v in body.items() if k in ("title", "description")})
        return 200, self._view(wishlist)

    def _soft_delete_dependent_wishlist(self, user_id, body, query, dependent_id, wishlist_id):
        self._guarded_dependent(self._auth(user_id), dependent_id)
        self._managed_wishlist(user_id, wishlist_id)["deleted"] = True
        return 204, None

    def _hard_delete_dependent_wishlist(self, user_id, body, query, dependent_id, wishlist_id):
        self._guarded_dependent(self._auth(user_id), dependent_id)
        if wishlist_id not in self.wishlists:
            raise HttpError(404, "Wishlist not found", "Not Found")
        del self.wishlists[wishlist_id]
        return 204, None

    def _restore_dependent_wishlist(self, user_id, body, query, dependent_id, wishlist_id):
        self._guarded_dependent(self._auth(user_id), dependent_id)
        wishlist = self.wishlists.get(wishlist_id)
        if wishlist is None:
            raise HttpError(404, "Wishlist not found", "Not Found")
        wishlist["deleted"] = False
        return 200, self._view(wishlist)

    def _create_dependent_item(self, user_id, body, query, dependent_id, wishlist_id):
        self._guarded_dependent(self._auth(user_id), dependent_id)
        wishlist = self._managed_wishlist(user_id, wishlist_id)
        item = self._new_item(body)
        wishlist["items"].append(item)
        return 201, item

    def _update_dependent_item(self, user_id, body, query, dependent_id, item_id):
        self._guarded_dependent(self._auth(user_id), dependent_id)
        _, item = self._managed_item(user_id, item_id)
        self._apply_item_fields(item, body)
        return 200, item

    def _delete_dependent_item(self, user_id, body, query, dependent_id, item_id):
        self._guarded_dependent(self._auth(user_id), dependent_id)
        wishlist, item = self._managed_item(user_id, item_id)
        wishlist["items"].remove(item)
        return 204, None

    def _dependent_item_quantity(self, user_id, body, query, dependent_id, item_id):
        self._guarded_dependent(self._auth(user_id), dependent_id)
        return self._item_quantity(user_id, body, query, item_id)

    def _dependent_item_received(self, user_id, body, query, dependent_id, item_id):
        self._guarded_dependent(self._auth(user_id), dependent_id)
        return self._item_received(user_id, body, query, item_id)

    # -------------------------------------------------------------------------
    # Social
    # -------------------------------------------------------------------------

    def _public_profile(self, user_id, body, query, username):
        uid = self._auth(user_id)
        return 200, self._public_user(uid, self._user_by_username(username))

    def _followers(self, user_id, body, query, username):
        uid = self._auth(user_id)
        self._user_by_username(username)
        return 200, [
            self._public_user(uid, self.users[follower])
            for follower, followee in sorted(self.follows) if followee == username
        ]

    def _following(self, user_id, body, query, username):
        uid = self._auth(user_id)
        user = self._user_by_username(username)
        return 200, [
            self._public_user(uid, self._user_by_username(followee))
            for follower, followee in sorted(self.follows) if follower == user["id"]
        ]

    def _follow(self, user_id, body, query, username):
        uid = self._auth(user_id)
        target = self._user_by_username(username)
        if target["id"] == uid:
            raise HttpError(400, "You cannot follow yourself", "Bad Request")
        if (uid, username) in self.follows:
            raise HttpError(409, "Already following", "Conflict")
        self.follows.add((uid, username))
        return 201, None

    def _unfollow(self, user_id, body, query, username):
        uid = self._auth(user_id)
        self.follows.discard((uid, username))
        return 204, None

    # -------------------------------------------------------------------------
    # Wishlists
    # -------------------------------------------------------------------------

    def _my_wishlists(self, user_id, body, query):
        uid = self._auth(user_id)
        return 200, [self._view(w) for w in self.wishlists.values() if w["ownerId"] == uid and not w["deleted"]]

    def _following_wishlists(self, user_id, body, query):
        uid = self._auth(user_id)
        followed = {self._user_by_username(name)["id"] for follower, name in self.follows if follower == uid}
        return 200, [
            self._view(w) for w in self.wishlists.values()
            if w["ownerId"] in followed and w["isPublic"] and not w["deleted"]
        ]

    def _get_wishlist(self, user_id, body, query, wishlist_id):
        uid = self._auth(user_id)
        wishlist = self.wishlists.get(wishlist_id)
        if wishlist is None or wishlist["deleted"]:
            raise HttpError(404, "Wishlist not found", "Not Found")
        if not (wishlist["isPublic"] or self._can_manage(uid, wishlist["ownerId"])):
            raise HttpError(404, "Wishlist not found", "Not Found")
        return 200, self._view(wishlist)

    def _create_wishlist(self, user_id, body, query):
        uid = self._auth(user_id)
        if not body.get("title"):
            raise HttpError(400, ["title should not be empty"], "Bad Request")
        wishlist = self.seed_wishlist(uid, title=body["title"])
        wishlist["description"] = body.get("description")
        return 201, self._view(wishlist)

    def _update_wishlist(self, user_id, body, query, wishlist_id):
        wishlist = self._managed_wishlist(self._auth(user_id), wishlist_id)
        wishlist.update({k: v for k, v in body.items() if k in ("title", "description")})
        if "isPublic" in body:
            self._set_public(wishlist, body["isPublic"])
        return 200, self._view(wishlist)

    def _delete_wishlist(self, user_id, body, query, wishlist_id):
        self._managed_wishlist(self._auth(user_id), wishlist_id)
        del self.wishlists[wishlist_id]
        return 204, None

    @staticmethod
    def _set_public(wishlist: dict, is_public: bool) -> None:
        wishlist["isPublic"] = is_public
        token = wishlist["sharing"].get("publicLinkToken")
        if is_public and not token:
            token = uuid.uuid4().hex
        wishlist["sharing"] = {"isPublic": is_public, "publicLinkToken": token if is_public else None}

    def _update_sharing(self, user_id, body, query, wishlist_id):
        wishlist = self._managed_wishlist(self._auth(user_id), wishlist_id)
        self._set_public(wishlist, bool(body.get("isPublic")))
        return 200, self._view(wishlist)

    def _public_wishlist(self, user_id, body, query, token):
        for wishlist in self.wishlists.values():
            if wishlist["isPublic"] and not wishlist["deleted"] and wishlist["sharing"]["publicLinkToken"] == token:
                return 200, self._view(wishlist)
        raise HttpError(404, "Wishlist not found", "Not Found")

    # -------------------------------------------------------------------------
    # Items
    # -------------------------------------------------------------------------

    def _add_item(self, user_id, body, query, wishlist_id):
        wishlist = self._managed_wishlist(self._auth(user_id), wishlist_id)
        item = self._new_item(body)
        wishlist["items"].append(item)
        return 201, item

    def _update_item_in_wishlist(self, user_id, body, query, wishlist_id, item_id):
        wishlist = self._managed_wishlist(self._auth(user_id), wishlist_id)
        item = next((i for i in wishlist["items"] if i["id"] == item_id), None)
        if item is None:
            raise HttpError(404, "Item not found", "Not Found")
        self._apply_item_fields(item, body)
        return 200, item

    def _remove_item_from_wishlist(self, user_id, body, query, wishlist_id, item_id):
        wishlist = self._managed_wishlist(self._auth(user_id), wishlist_id)
        before = len(wishlist["items"])
        wishlist["items"] = [i for i in wishlist["items"] if i["id"] != item_id]
        if len(wishlist["items"]) == before:
            raise HttpError(404, "Item not found", "Not Found")
        return 204, None

    def _update_item(self, user_id, body, query, item_id):
        _, item = self._managed_item(self._auth(user_id), item_id)
        self._apply_item_fields(item, body)
        return 200, item

    def _item_quantity(self, user_id, body, query, item_id):
        _, item = self._managed_item(self._auth(user_id), item_id)
        if body.get("desired", 0) < 1:
            raise HttpError(400, ["desired must not be less than 1"], "Bad Request")
        self._apply_item_fields(item, {"quantity": {"desired": body["desired"]}})
        return 200, item

    def _delete_item(self, user_id, body, query, item_id):
        wishlist, item = self._managed_item(self._auth(user_id), item_id)
        wishlist["items"].remove(item)
        return 204, None

    def _item_received(self, user_id, body, query, item_id):
        _, item = self._managed_item(self._auth(user_id), item_id)
        quantity = item["quantity"] if isinstance(item.get("quantity"), dict) else {"desired": item.get("quantity", 1)}
        quantity["received"] = quantity.get("received", 0) + body.get("quantityReceived", 1)
        item["quantity"] = quantity
        return 200, item

    # -------------------------------------------------------------------------
    # Reservations
    # -------------------------------------------------------------------------

    def _create_reservation(self, user_id, body, query):
        uid = self._auth(user_id)
        wishlist, item = self._find_item(body["itemId"])
        if self._can_manage(uid, wishlist["ownerId"]):
            raise HttpError(400, "You cannot reserve your own item", "Bad Request")
        if item.get("reservedBy") and item["reservedBy"] != uid:
            raise HttpError(409, "Item is already reserved", "Conflict")
        reservation = {
            "id": _new_id(),
            "itemId": item["id"],
            "userId": uid,
            "quantity": body.get("quantity", 1),
            "status": "PENDING",
            "message": body.get("message"),
            "createdAt": _now(),
            "updatedAt": _now(),
        }
        self.reservations[reservation["id"]] = reservation
        item["reservedBy"] = uid
        item["reservedAt"] = _now()
        return 201, reservation

    def _own_reservation(self, user_id: str, reservation_id: str) -> dict:
        reservation = self.reservations.get(reservation_id)
        if reservation is None or reservation["userId"] != user_id:
            raise HttpError(404, "Reservation not found", "Not Found")
        return reservation

    def _my_reservations(self, user_id, body, query):
        uid = self._auth(user_id)
        return 200, [r for r in self.reservations.values() if r["userId"] == uid and r["status"] != "CANCELLED"]

    def _get_reservation(self, user_id, body, query, reservation_id):
        return 200, self._own_reservation(self._auth(user_id), reservation_id)

    def _update_reservation(self, user_id, body, query, reservation_id):
        reservation = self._own_reservation(self._auth(user_id), reservation_id)
        reservation["quantity"] = body["quantity"]
        return 200, reservation

    def _confirm_reservation(self, user_id, body, query, reservation_id):
        reservation = self._own_reservation(self._auth(user_id), reservation_id)
        reservation["status"] = "CONFIRMED"
        return 200, reservation

    def _cancel_reservation(self, user_id, body, query, reservation_id):
        reservation = self._own_reservation(self._auth(user_id), reservation_id)
        reservation["status"] = "CANCELLED"
        _, item = self._find_item(reservation["itemId"])
        item["reservedBy"] = None
        item["reservedAt"] = None
        return 200, reservation

    # -------------------------------------------------------------------------
    # Conversations
    # -------------------------------------------------------------------------

    def _start_conversation(self, user_id, body, query, item_id):
        uid = self._auth(user_id)
        wishlist, _ = self._find_item(item_id)
        for conversation in self.conversations.values():
            if conversation["itemId"] == item_id and uid in conversation["participants"]:
                return 200, conversation
        conversation = {
            "id": _new_id(),
            "itemId": item_id,
            "participants": [uid, wishlist["ownerId"]],
            "createdAt": _now(),
            "updatedAt": _now(),
        }
        self.conversations[conversation["id"]] = conversation
        self.messages[conversation["id"]] = []
        return 201, conversation

    def _conversation(self, user_id: str, conversation_id: str) -> dict:
        conversation = self.conversations.get(conversation_id)
        if conversation is None or user_id not in conversation["participants"]:
            raise HttpError(404, "Conversation not found", "Not Found")
        return conversation

    def _list_messages(self, user_id, body, query, conversation_id):
        uid = self._auth(user_id)
        self._conversation(uid, conversation_id)
        return 200, [
            {
                "id": m["id"], "message": m["message"], "timestamp": m["timestamp"],
                "isFromCurrentUser": m["senderId"] == uid,
            }
            for m in self.messages[conversation_id]
        ]

    def _send_message(self, user_id, body, query, conversation_id):
        uid = self._auth(user_id)
        self._conversation(uid, conversation_id)
        message = {"id": _new_id(), "message": body["message"], "timestamp": _now(), "senderId": uid}
        self.messages[conversation_id].append(message)
        return 201, {"message": message["message"], "timestamp": message["timestamp"]}
