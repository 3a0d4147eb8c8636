"""
Composition root.

build_app() wires storage, session, HTTP client, cache and services into one
WishlistApp. A UI shell or script builds one per process:

    app = build_app()
    app.start()                  # restore a persisted session, if any
    lists = app.wishlists.list_mine()
    app.close()
"""

import logging
from dataclasses import dataclass, field

from auth.permissions import PermissionChecker
from auth.service import AuthService
from auth.session import SessionManager, SessionStorage
from clients.api_client import ApiClient
from clients.memory_storage import MemoryStorage
from clients.valkey_client import ValkeyClient
from core.cache import QueryCache
from core.config import ClientConfig
from core.event_bus import EventBus
from core.models import Identity
from core.services.conversation_service import ConversationService
from core.services.dependent_service import DependentService
from core.services.dependent_wishlist_service import DependentWishlistService
from core.services.follow_service import FollowService
from core.services.item_service import ItemService
from core.services.reservation_service import ReservationService
from core.services.user_service import UserService
from core.services.wishlist_service import WishlistService
from core.tasks import TaskRunner

logger = logging.getLogger(__name__)


@dataclass
class WishlistApp:
    """Everything a consumer needs, already wired together."""

    config: ClientConfig
    storage: SessionStorage
    event_bus: EventBus
    session: SessionManager
    api: ApiClient
    tasks: TaskRunner
    cache: QueryCache
    auth: AuthService
    users: UserService
    dependents: DependentService
    wishlists: WishlistService
    dependent_wishlists: DependentWishlistService
    items: ItemService
    reservations: ReservationService
    follows: FollowService
    conversations: ConversationService
    permissions: PermissionChecker
    _closed: bool = field(default=False, repr=False)

    def start(self) -> Identity | None:
        """Resolve the persisted session. Gated reads wait for this."""
        return self.auth.restore_session()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.tasks.shutdown(wait=False)
        self.api.close()
        if isinstance(self.storage, ValkeyClient):
            self.storage.close()


def build_app(
    config: ClientConfig | None = None,
    storage: SessionStorage | None = None,
) -> WishlistApp:
    """
    Wire a WishlistApp.

    Args:
        config: Defaults to ClientConfig.from_env()
        storage: Durable session storage. Defaults to Valkey when
            config.valkey_url is set, otherwise in-process memory.
    """
    config = config or ClientConfig.from_env()

    if storage is None:
        if config.valkey_url:
            storage = ValkeyClient(config.valkey_url)
        else:
            logger.info("No Valkey URL configured, session will not survive restarts")
            storage = MemoryStorage()

    event_bus = EventBus()
    session = SessionManager(storage, event_bus)
    api = ApiClient(config, session)
    tasks = TaskRunner(max_workers=config.background_workers)
    cache = QueryCache(
        tasks,
        default_stale_seconds=config.default_stale_seconds,
        retry_attempts=config.query_retry_attempts,
        event_bus=event_bus,
    )
    # Nothing cached for one identity may be served to the next
    event_bus.subscribe("SessionEnded", lambda event: cache.clear())

    collaborators = (api, cache, session, config)
    dependents = DependentService(*collaborators)

    return WishlistApp(
        config=config,
        storage=storage,
        event_bus=event_bus,
        session=session,
        api=api,
        tasks=tasks,
        cache=cache,
        auth=AuthService(api, session, config.auth_ready_timeout_seconds),
        users=UserService(*collaborators),
        dependents=dependents,
        wishlists=WishlistService(*collaborators),
        dependent_wishlists=DependentWishlistService(*collaborators),
        items=ItemService(*collaborators),
        reservations=ReservationService(*collaborators),
        follows=FollowService(*collaborators),
        conversations=ConversationService(*collaborators),
        permissions=PermissionChecker(session, dependents),
    )
