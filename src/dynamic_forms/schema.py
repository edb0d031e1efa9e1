"""Normalization of a HAL form schema into a list of field schemas.

A form schema maps attribute names to descriptors like::

    {"type": "[]User", "name": "Watchers", "required": False, "writable": True,
     "location": "_links", "_links": {"allowedValues": {"href": "/api/users"}}}

Relation and meta attributes may also come grouped in the reserved `_links` and
`_meta` sub-maps. Each descriptor gets a `key` namespaced by its location.
"""
import logging
from typing import Any, Dict, List

from click import style

from .utils import get_by_path

log = logging.getLogger('DynamicForms')

LOCATIONS = ('_links', '_meta')
MULTI_VALUE_MARKER = '[]'


def get_attribute_key(field_schema: dict, key: str) -> str:
    """Namespace `key` by the location of the field."""
    location = field_schema.get('location')
    if location in LOCATIONS:
        return f'{location}.{key}'
    return key


def get_field_property(key: str) -> str:
    """Map a field key that may be a `_links.property` to the property name."""
    return key.split('.')[-1]


def is_field_schema(value: Any) -> bool:
    return isinstance(value, dict) and bool(value.get('type'))


def is_multi_select_field(field_schema: dict) -> bool:
    return (field_schema.get('type') or '').startswith(MULTI_VALUE_MARKER)


def field_type(field_schema: dict) -> str:
    """The declared type without the multi value marker."""
    return field_schema['type'].replace(MULTI_VALUE_MARKER, '')


def get_allowed_values(field_schema: dict) -> list | dict | None:
    """Finds the source of the selectable values, inline list or remote link."""
    for path in ('allowedValues', '_embedded.allowedValues', '_links.allowedValues'):
        allowed_values = get_by_path(field_schema, path)
        if allowed_values is not None:
            return allowed_values
    return None


def _with_key(name: str, descriptor: dict, location: str = None) -> dict:
    field_schema = dict(descriptor)
    if location and not field_schema.get('location'):
        field_schema['location'] = location
    field_schema.setdefault('location', 'attribute')
    field_schema['key'] = get_attribute_key(field_schema, name)
    allowed_values = get_allowed_values(descriptor)
    if allowed_values is not None:
        field_schema['allowedValues'] = allowed_values
    return field_schema


def _iter_descriptors(form_schema: Dict[str, Any]):
    for name, descriptor in form_schema.items():
        if name in LOCATIONS and isinstance(descriptor, dict) and not is_field_schema(descriptor):
            for sub_name, sub_descriptor in descriptor.items():
                yield sub_name, sub_descriptor, name
        else:
            yield name, descriptor, None


def get_fields_schemas_with_key(form_schema: Dict[str, Any]) -> List[dict]:
    """Returns the writable field schemas of `form_schema`, in schema order."""
    ret = {}
    for name, descriptor, location in _iter_descriptors(form_schema or {}):
        if not is_field_schema(descriptor):
            continue
        if not descriptor.get('writable'):
            log.debug('skipping read-only field %s', style(name, fg='yellow'))
            continue
        field_schema = _with_key(name, descriptor, location)
        if field_schema['key'] in ret:
            log.debug('field %s declared twice, keeping the first one', style(field_schema['key'], fg='yellow'))
            continue
        ret[field_schema['key']] = field_schema
    return list(ret.values())
