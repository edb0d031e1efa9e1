import asyncio
import logging
from enum import Enum
from typing import List

from click import style
from orjson import dumps

from ..i18n import I18n
from ..schema import is_multi_select_field
from ..utils import link_href, link_title
from .cache import OptionCache
from .links import Collection, RemoteValuesLink
from .sorting import HalSorting

log = logging.getLogger('DynamicForms')


class LoadState(Enum):
    UNLOADED = 'unloaded'
    LOADING = 'loading'
    LOADED = 'loaded'


class OptionLoader:
    """Loads the selectable values of one field.

    `allowed_values` is either the inline list of the schema or a
    `RemoteValuesLink`. The unfiltered remote collection goes through the
    shared `OptionCache`, queried collections are always fetched again.
    """

    def __init__(self, field_schema: dict, allowed_values: list | RemoteValuesLink | None,
                 cache: OptionCache, sorting: HalSorting = None, i18n: I18n = None, value=None):
        self.schema = field_schema
        self.allowed_values = allowed_values
        self.cache = cache
        self.sorting = sorting or HalSorting()
        self.i18n = i18n or I18n()
        self.value = value
        self.state = LoadState.UNLOADED
        self.fully_loaded = False
        self.available_options: List[dict] = []
        self.value_options: List[dict] = []
        self._values_loaded: asyncio.Future | None = None
        self._loaded = False
        self._pending = 0

    @property
    def placeholder(self) -> str:
        return self.i18n.t('placeholders.default')

    @property
    def values_loaded(self) -> asyncio.Future:
        """Resolved as soon as the options are available for the first time."""
        if self._values_loaded is None:
            self._values_loaded = asyncio.get_running_loop().create_future()
        return self._values_loaded

    async def wait_until_loaded(self) -> List[dict]:
        return await self.values_loaded

    async def load_values(self, query: str = None) -> List[dict]:
        """Returns the option entries of the field, filtered by `query` on the server."""
        if isinstance(self.allowed_values, RemoteValuesLink):
            return await self.load_values_from_backend(query)
        self.set_values(self.allowed_values or [])
        self._mark_loaded()
        return self.value_options

    async def load_values_from_backend(self, query: str = None) -> List[dict]:
        self._pending += 1
        self.state = LoadState.LOADING
        try:
            collection = await self.load_allowed_values(query)
        except BaseException:
            self._pending -= 1
            # overlapping loads may still be running or may have succeeded meanwhile
            if not self._pending:
                self.state = LoadState.LOADED if self._loaded else LoadState.UNLOADED
            raise
        self._pending -= 1
        if collection.is_complete(query):
            self.fully_loaded = True
        elements = list(collection.elements)
        hrefs = {link_href(e) for e in elements}
        # keep the current selection representable even when filtered out
        elements.extend(v for v in self.current_values if link_href(v) not in hrefs)
        self.set_values(elements)
        self.state = LoadState.LOADED
        self._loaded = True
        self._resolve_loaded()
        return self.value_options

    async def load_allowed_values(self, query: str = None) -> Collection:
        # only the search without params is cached
        if not query:
            return await self.cache.cache_value(self.allowed_values.href, self.fetch_allowed_value_query)
        return await self.fetch_allowed_value_query(query)

    async def fetch_allowed_value_query(self, query: str = None) -> Collection:
        return await self.allowed_values.fetch(self.allowed_values_filter(query))

    def allowed_values_filter(self, query: str = None) -> dict:
        """Filters sent to the backend to reduce the allowed values."""
        if not query:
            return {}
        return {'filters': dumps([{'name': {'operator': '~', 'values': [query]}}]).decode()}

    def set_values(self, values: list) -> None:
        self.available_options = self.sort_values(values)
        self.add_empty_option()
        self.value_options = [self.map_allowed_value(v) for v in self.available_options]

    def add_value(self, value: dict) -> None:
        """Adds a value created on the fly, without reloading the options."""
        self.available_options.append(value)
        self.value_options.append(self.map_allowed_value(value))

    def sort_values(self, values: list) -> list:
        return self.sorting.sort(values)

    def add_empty_option(self) -> None:
        # empty options are not available for required or multi select fields
        if self.is_required() or is_multi_select_field(self.schema):
            return
        empties = [o for o in self.available_options if self.is_empty_option(o)]
        others = [o for o in self.available_options if not self.is_empty_option(o)]
        empty = empties[0] if empties else {'name': self.placeholder, 'href': None}
        self.available_options = [empty, *others]

    def is_empty_option(self, option: dict) -> bool:
        return not link_href(option) or link_title(option) == self.placeholder

    def is_required(self) -> bool:
        return bool(self.schema.get('required'))

    @staticmethod
    def map_allowed_value(value: dict) -> dict:
        return {'name': link_title(value), 'href': link_href(value)}

    @property
    def selected_option(self) -> dict | None:
        href = link_href(self.value)
        return next((o for o in self.value_options if o['href'] == href), None)

    @property
    def current_values(self) -> List[dict]:
        values = self.value if isinstance(self.value, list) else [self.value]
        return [v for v in values if link_href(v)]

    @property
    def current_value_invalid(self) -> bool:
        current = self.current_values
        if current:
            hrefs = {link_href(o) for o in self.available_options}
            return any(link_href(v) not in hrefs for v in current)
        return self.is_required()

    def _mark_loaded(self) -> None:
        self.state = LoadState.LOADED
        self.fully_loaded = True
        self._loaded = True
        self._resolve_loaded()

    def _resolve_loaded(self) -> None:
        try:
            future = self.values_loaded
        except RuntimeError:
            return
        if not future.done():
            future.set_result(self.value_options)
        log.debug('options of %s loaded', style(str(self.schema.get('key')), fg='green'))

    def __repr__(self):
        return f'<OptionLoader {self.schema.get("key")} {self.state.value}>'
