import asyncio

import httpx
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from dynamic_forms import DynamicFieldsService, FormsService, FormTransport, I18n, OptionCache


def hal_collection(elements, count=None, total=None) -> dict:
    ret = {'_type': 'Collection', '_embedded': {'elements': elements}}
    if count is not None:
        ret['count'] = count
    if total is not None:
        ret['total'] = total
    return ret


def user(id: int, name: str) -> dict:
    return {'_type': 'User', 'id': id, 'name': name,
            '_links': {'self': {'href': f'/api/users/{id}', 'title': name}}}


class FakeBackend:
    """Records the requests and answers with the registered routes."""

    def __init__(self, delay: float = 0):
        self.routes = {}
        self.calls = []
        self.delay = delay

    def route(self, method: str, path: str, status: int = 200, json=None):
        self.routes[(method.upper(), path)] = (status, json)

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        status, json = self.routes.get((request.method, request.url.path), (404, {'message': 'not found'}))
        return httpx.Response(status, json=json)

    def count(self, method: str, path: str) -> int:
        return sum(1 for r in self.calls if r.method == method.upper() and r.url.path == path)


class FakeRedis:
    """Just enough of `redis.asyncio.Redis` for the option cache."""

    def __init__(self, failing=()):
        self.data = {}
        self.failing = failing
        self.closed = False

    async def get(self, key):
        if 'get' in self.failing:
            raise RedisConnectionError('redis down')
        return self.data.get(key)

    async def set(self, key, value, ex=None):
        if 'set' in self.failing:
            raise RedisConnectionError('redis down')
        self.data[key] = value

    async def aclose(self):
        self.closed = True


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def client(backend):
    return httpx.AsyncClient(transport=httpx.MockTransport(backend.handler), base_url='http://test')


@pytest.fixture
def cache():
    """A fresh option cache per test."""
    return OptionCache()


@pytest.fixture
def i18n():
    return I18n('it', {'label_create': 'Crea'})


@pytest.fixture
def fields_service(client, cache, i18n):
    return DynamicFieldsService(client, cache, i18n)


@pytest.fixture
def forms_service(client):
    return FormsService(FormTransport(client))


@pytest.fixture
def work_package_schema():
    return {
        '_type': 'Schema',
        'subject': {'type': 'String', 'name': 'Subject', 'required': True, 'hasDefault': False,
                    'writable': True, 'minLength': 1, 'maxLength': 255},
        'description': {'type': 'Formattable', 'name': 'Description', 'required': False,
                        'hasDefault': False, 'writable': True, 'options': {'rtl': True}},
        'dueDate': {'type': 'Date', 'name': 'Finish date', 'required': False, 'hasDefault': False,
                    'writable': True},
        'createdAt': {'type': 'DateTime', 'name': 'Created on', 'writable': False},
        'estimatedTime': {'type': 'Duration', 'name': 'Estimated time', 'writable': True},
        'assignee': {'type': 'User', 'name': 'Assignee', 'required': False, 'hasDefault': False,
                     'writable': True, 'location': '_links',
                     '_links': {'allowedValues': {'href': '/api/users'}}},
        'watchers': {'type': '[]User', 'name': 'Watchers', 'required': False, 'hasDefault': False,
                     'writable': True, 'location': '_links',
                     '_links': {'allowedValues': {'href': '/api/users'}}},
        'priority': {'type': 'Priority', 'name': 'Priority', 'required': True, 'hasDefault': True,
                     'writable': True, 'location': '_links',
                     '_embedded': {'allowedValues': [
                         {'_type': 'Priority', 'position': 2,
                          '_links': {'self': {'href': '/api/priorities/2', 'title': 'Normal'}}},
                         {'_type': 'Priority', 'position': 1,
                          '_links': {'self': {'href': '/api/priorities/1', 'title': 'Low'}}},
                     ]}},
        '_attributeGroups': [
            {'_type': 'WorkPackageFormAttributeGroup', 'name': 'Details',
             'attributes': ['dueDate', 'priority']},
            {'_type': 'WorkPackageFormAttributeGroup', 'name': 'Costs', 'attributes': ['overallCosts']},
        ],
        '_links': {'self': {'href': '/api/work_packages/schemas/1-1'}},
    }


@pytest.fixture
def work_package_payload():
    return {
        'subject': 'Fix the login',
        'description': {'raw': 'It fails'},
        'dueDate': None,
        '_meta': {'notify': True},
        '_links': {
            'assignee': {'href': '/api/users/3', 'title': 'Jane'},
            'watchers': [{'href': '/api/users/3', 'title': 'Jane'}, {'href': None}],
            'priority': {'href': None},
        },
    }
