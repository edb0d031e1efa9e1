import logging

import httpx
from click import style
from orjson import dumps, loads

log = logging.getLogger('DynamicForms')

JSON_HEADERS = {'content-type': 'application/json; charset=utf-8', 'accept': 'application/json'}


class FormTransport:
    """JSON requests to the resource endpoints, on the session's client."""

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def request(self, method: str, url: str, body: dict = None) -> dict | None:
        log.info('%s %s', style(method.upper(), fg='red'), style(url, fg='blue'))
        response = await self.client.request(method.upper(), url, content=dumps(body), headers=JSON_HEADERS)
        response.raise_for_status()
        return loads(response.content) if response.content else None

    async def create(self, url: str, body: dict) -> dict | None:
        return await self.request('post', url, body)

    async def update(self, url: str, body: dict) -> dict | None:
        return await self.request('patch', url, body)
