import logging

import httpx
from click import style
from orjson import JSONDecodeError, loads

from ..exceptions import OptionFetchFailure
from ..utils import get_by_path

log = logging.getLogger('DynamicForms')


class Collection:
    """A (possibly paginated) HAL collection of allowed values."""

    def __init__(self, elements: list, count: int = None, total: int = None):
        self.elements = list(elements or ())
        self.count = count
        self.total = total

    @classmethod
    def from_hal(cls, body: dict) -> 'Collection':
        return cls(get_by_path(body, '_embedded.elements') or [], body.get('count'), body.get('total'))

    def to_hal(self) -> dict:
        return {'_embedded': {'elements': self.elements}, 'count': self.count, 'total': self.total}

    def is_complete(self, query: str = None) -> bool:
        """True when the collection holds every possible value."""
        if self.count is None or self.total is None:
            return True
        return not query and self.count == self.total

    def __iter__(self):
        return iter(self.elements)

    def __len__(self):
        return len(self.elements)

    def __repr__(self):
        return f'<Collection {len(self.elements)}/{self.total}>'


class RemoteValuesLink:
    """The link to the allowed values of a field."""

    def __init__(self, href: str, client: httpx.AsyncClient):
        self.href = href
        self.client = client

    @classmethod
    def from_link(cls, link: dict, client: httpx.AsyncClient) -> 'RemoteValuesLink':
        return cls(link['href'], client)

    async def fetch(self, params: dict = None) -> Collection:
        """GET the collection behind the link, filtered by `params`."""
        log.debug('fetching allowed values from %s', style(self.href, fg='blue'))
        try:
            response = await self.client.get(self.href, params=params or None)
            response.raise_for_status()
            body = loads(response.content)
        except (httpx.HTTPError, JSONDecodeError) as exc:
            raise OptionFetchFailure(self.href, str(exc)) from exc
        return Collection.from_hal(body)

    def __repr__(self):
        return f'<RemoteValuesLink {self.href}>'
