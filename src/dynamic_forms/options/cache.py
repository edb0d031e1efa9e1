import asyncio
import logging
from typing import Awaitable, Callable, Dict

from click import style
from orjson import dumps, loads
from redis.asyncio import Redis
from redis.exceptions import RedisError

from .links import Collection

log = logging.getLogger('DynamicForms')


def _retrieve_exception(task: asyncio.Task) -> None:
    # the failure is delivered to every awaiting caller, not to the event loop
    if not task.cancelled():
        task.exception()


class OptionCache:
    """Allowed values cache shared by every form of the owning session.

    One fetch per key at a time: callers arriving while a fetch is pending
    share the same task, then the settled task is kept forever.
    """

    def __init__(self):
        self._values: Dict[str, asyncio.Task] = {}

    async def cache_value(self, key: str, factory: Callable[[], Awaitable]):
        """Returns the value cached under `key`, calling `factory` only on a miss."""
        task = self._values.get(key)
        if task is None:
            log.debug('option cache miss on %s', style(key, fg='yellow'))
            task = asyncio.ensure_future(factory())
            task.add_done_callback(_retrieve_exception)
            self._values[key] = task
        else:
            log.debug('option cache hit on %s', style(key, fg='green'))
        # a caller giving up must not cancel the fetch for the others
        return await asyncio.shield(task)

    def clear(self) -> None:
        for task in self._values.values():
            if not task.done():
                task.cancel()
        self._values.clear()

    async def aclose(self) -> None:
        self.clear()

    def __contains__(self, key: str) -> bool:
        return key in self._values

    def __len__(self):
        return len(self._values)


class RedisOptionCache(OptionCache):
    """Option cache keeping the settled collections in Redis.

    Redis is best effort: when it is unreachable the collections are still
    fetched and cached in memory.
    """

    def __init__(self, redis_connection: Redis | str = 'redis://localhost:6379/0', key: str = 'options'):
        super().__init__()
        self.connection = Redis.from_url(redis_connection) if isinstance(redis_connection, str) \
            else redis_connection
        self.key = key
        self.key_format = '{self.key}:{href}'

    async def cache_value(self, key: str, factory: Callable[[], Awaitable[Collection]]):

        async def load() -> Collection:
            redis_key = self.key_format.format(self=self, href=key)
            try:
                raw = await self.connection.get(redis_key)
            except RedisError as exc:
                log.warning('option cache read of %s failed: %s', style(redis_key, fg='red'), exc)
                raw = None
            if raw is not None:
                return Collection.from_hal(loads(raw))
            collection = await factory()
            try:
                await self.connection.set(redis_key, dumps(collection.to_hal()))
            except RedisError as exc:
                log.warning('option cache write of %s failed: %s', style(redis_key, fg='red'), exc)
            return collection

        return await super().cache_value(key, load)

    async def aclose(self) -> None:
        await super().aclose()
        await self.connection.aclose()
