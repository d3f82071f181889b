"""
Dishka DI Container Setup.

Registers the decorator chains once, at app scope:

    ConvoContract = CachedConvoContract(HttpConvoContract(ConvoManager, settings), ServerCache)
    ConvoManager  = LoggingConvoManager(StoreConvoManager(Store, settings))

Backends are picked from configuration:
- DATABASE_URL empty → InMemoryStore, otherwise PostgresStore
- REDIS_URL empty    → InMemoryServerCache, otherwise RedisServerCache

Tests pass their own store / server cache / settings to AppProvider.

Dishka concepts:
- Provider: Class that defines how to create dependencies
- @provide: Decorator to mark factory methods
- Scope.APP: created once, finalized when the container closes
"""

from collections.abc import AsyncIterable
from typing import Optional

from dishka import AsyncContainer, Provider, Scope, make_async_container, provide

from convos.application.managers import ConvoManager, LoggingConvoManager, StoreConvoManager
from convos.config.settings import Config, ContractSettings
from convos.domain.ports import ServerCache, Store
from convos.infrastructure.cache import (
    CachedConvoContract,
    InMemoryServerCache,
    RedisServerCache,
    close_redis_client,
    create_redis_client,
)
from convos.infrastructure.persistence import InMemoryStore, PostgresStore
from convos.presentation.contracts import ConvoContract, HttpConvoContract


class AppProvider(Provider):
    """
    Application dependency provider.

    Registers all dependencies and their implementations.
    """

    def __init__(
        self,
        store: Optional[Store] = None,
        server_cache: Optional[ServerCache] = None,
        settings: Optional[ContractSettings] = None,
    ):
        super().__init__()
        self._store = store
        self._server_cache = server_cache
        self._settings = settings

    # ==================== SETTINGS ====================

    @provide(scope=Scope.APP)
    def get_settings(self) -> ContractSettings:
        return self._settings or ContractSettings.from_config()

    # ==================== PERSISTENCE ====================

    @provide(scope=Scope.APP)
    async def get_store(self) -> AsyncIterable[Store]:
        """
        Provide the Store (singleton, app-scoped).

        - async because the Postgres pool opens asynchronously
        - the code after yield runs when the container closes
        """
        if self._store is not None:
            yield self._store
            return

        if Config.DATABASE_URL:
            store = await PostgresStore.connect(
                Config.DATABASE_URL,
                min_size=Config.DATABASE_POOL_MIN_SIZE,
                max_size=Config.DATABASE_POOL_MAX_SIZE,
            )
        else:
            store = InMemoryStore()
        yield store
        await store.close()

    # ==================== CACHE ====================

    @provide(scope=Scope.APP)
    async def get_server_cache(self) -> AsyncIterable[ServerCache]:
        if self._server_cache is not None:
            yield self._server_cache
            return

        if not Config.REDIS_URL:
            yield InMemoryServerCache()
            return

        client = await create_redis_client(Config.REDIS_URL)
        yield RedisServerCache(client)
        await close_redis_client(client)

    # ==================== MANAGER ====================

    @provide(scope=Scope.APP)
    def get_convo_manager(self, store: Store, settings: ContractSettings) -> ConvoManager:
        """
        Provide ConvoManager implementation.

        - Return type is ABSTRACT (ConvoManager)
        - Implementation is the logging decorator around the store-backed manager
        """
        return LoggingConvoManager(StoreConvoManager(store, settings))

    # ==================== CONTRACT ====================

    @provide(scope=Scope.APP)
    def get_convo_contract(
        self,
        manager: ConvoManager,
        server_cache: ServerCache,
        settings: ContractSettings,
    ) -> ConvoContract:
        return CachedConvoContract(
            HttpConvoContract(manager, settings),
            server_cache,
            settings.server_cache_ttl,
        )


def create_container(
    store: Optional[Store] = None,
    server_cache: Optional[ServerCache] = None,
    settings: Optional[ContractSettings] = None,
) -> AsyncContainer:
    """
    Create and configure the DI container.

    - make_async_container() creates the container with all providers
    - Call this ONCE at app startup
    """
    return make_async_container(AppProvider(store, server_cache, settings))
