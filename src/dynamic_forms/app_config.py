import logging

import httpx
from click import style

from .fields import DynamicFieldsService
from .forms import FormsService, FormTransport
from .i18n import I18n
from .options import OptionCache, RedisOptionCache
from .utils import dict_merge

log = logging.getLogger('DynamicForms')

default_config = dict(
    http=dict(
        base_url='',
        timeout=10.0,
        headers={'accept': 'application/hal+json, application/json'},
        cookies=None,
    ),
    cache=dict(
        redis_url=None,
        key='options',
    ),
    i18n=dict(
        locale='en',
        texts={},
    ),
    forms=dict(
        validation_status=422,
    ),
)


class FormsApplication:
    """Everything a session needs to render, bind and submit dynamic forms."""

    def __init__(self, client: httpx.AsyncClient, cache: OptionCache, i18n: I18n, validation_status: int = 422):
        self.client = client
        self.cache = cache
        self.i18n = i18n
        self.fields = DynamicFieldsService(client, cache, i18n)
        self.forms = FormsService(FormTransport(client), validation_status)

    async def aclose(self) -> None:
        await self.cache.aclose()
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()


def setup_application(config: dict = None, transport: httpx.AsyncBaseTransport = None) -> FormsApplication:
    """Set up the session services from `config` merged over `default_config`."""
    config = dict_merge(config or {}, default_config)

    http_config = config['http']
    client = httpx.AsyncClient(base_url=http_config['base_url'], timeout=http_config['timeout'],
                               headers=http_config['headers'], cookies=http_config['cookies'],
                               transport=transport)

    cache_config = config['cache']
    if cache_config['redis_url']:
        log.info('option cache on %s', style(cache_config['redis_url'], fg='blue'))
        cache = RedisOptionCache(cache_config['redis_url'], cache_config['key'])
    else:
        cache = OptionCache()

    i18n = I18n(config['i18n']['locale'], config['i18n']['texts'])
    return FormsApplication(client, cache, i18n, config['forms']['validation_status'])
