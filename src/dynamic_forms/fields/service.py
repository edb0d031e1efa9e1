import logging
from typing import Any, List

import httpx
from click import style

from ..exceptions import SchemaMappingGap
from ..i18n import I18n
from ..options import HalSorting, OptionCache, OptionLoader, RemoteValuesLink
from ..schema import get_field_property, get_fields_schemas_with_key
from ..utils import get_by_path, is_value
from .catalogue import InputCatalogue
from .groups import get_form_with_field_groups

log = logging.getLogger('DynamicForms')


class DynamicFieldsService:
    """Turns a form schema and its payload into the field configs to render."""

    def __init__(self, client: httpx.AsyncClient, cache: OptionCache = None, i18n: I18n = None,
                 sorting: HalSorting = None, catalogue: InputCatalogue = None):
        self.client = client
        self.cache = cache if cache is not None else OptionCache()
        self.i18n = i18n or I18n()
        self.sorting = sorting or HalSorting()
        self.catalogue = catalogue or InputCatalogue(self.i18n)

    def get_config(self, form_schema: dict, form_payload: dict = None,
                   field_groups: List[dict] = None) -> List[dict]:
        """Returns the ordered field configs, grouped by `field_groups`.

        Without explicit `field_groups` the `_attributeGroups` of the schema are used.
        """
        form_payload = form_payload or {}
        if field_groups is None:
            field_groups = self.get_field_groups_from_schema(form_schema)
        fields = []
        for field_schema in get_fields_schemas_with_key(form_schema):
            field = self.get_field_config(field_schema, form_payload)
            if field is not None:
                fields.append(field)
        return get_form_with_field_groups(field_groups, fields)

    def get_model(self, form_payload: dict = None) -> dict:
        return self.get_formatted_fields_model(form_payload)

    @staticmethod
    def get_field_groups_from_schema(form_schema: dict) -> List[dict]:

        def fields_filter(attributes):
            return lambda field: field['templateOptions'].get('property') in attributes

        return [
            {'name': group.get('name'), 'fieldsFilter': fields_filter(group.get('attributes') or ())}
            for group in form_schema.get('_attributeGroups') or ()
            if isinstance(group, dict)
        ]

    def get_formatted_fields_model(self, form_model: dict = None) -> dict:
        form_model = dict(form_model or {})
        resources_model = form_model.pop('_links', None)
        meta_model = form_model.pop('_meta', None)
        model = {key: value for key, value in form_model.items() if is_value(value)}
        model['_meta'] = meta_model
        model['_links'] = self.get_formatted_resources_model(resources_model)
        return model

    @staticmethod
    def get_formatted_resources_model(resources_model: dict = None) -> dict:
        """Keep the references with an href, adding the `name` selects show as label."""

        def format_resource(resource):
            if isinstance(resource, dict) and resource.get('href'):
                return {**resource, 'name': resource.get('name') or resource.get('title')}
            return None

        ret = {}
        for key, resource in (resources_model or {}).items():
            if isinstance(resource, list):
                value = [r for r in map(format_resource, resource) if r]
            else:
                value = format_resource(resource)
            if value:
                ret[key] = value
        return ret

    def get_field_config(self, field_schema: dict, form_payload: dict) -> dict | None:
        key = field_schema['key']
        try:
            field_type_config = self.catalogue.get_field_type_config(field_schema)
        except SchemaMappingGap as exc:
            log.warning('%s, the full field configuration is %s',
                        style(exc.message, fg='red'), field_schema)
            return None
        template_options = field_type_config.pop('templateOptions', {})
        payload_value = get_by_path(form_payload, key)
        options = self.get_field_options(field_schema, payload_value)

        generic = {
            'property': get_field_property(key),
            'required': bool(field_schema.get('required')),
            'label': field_schema.get('name'),
            'hasDefault': bool(field_schema.get('hasDefault')),
        }
        if payload_value is not None:
            generic['payloadValue'] = payload_value
        for constraint in ('minLength', 'maxLength'):
            if field_schema.get(constraint):
                generic[constraint] = field_schema[constraint]

        return {
            **field_type_config,
            'key': key,
            'wrappers': ['dynamic-field-wrapper'],
            'className': f"dynamic-form--field {field_type_config.get('className') or ''}".strip(),
            'templateOptions': {
                **generic,
                **template_options,
                **({'options': options} if options is not None else {}),
            },
        }

    def get_field_options(self, field_schema: dict, value: Any = None) -> OptionLoader | None:
        allowed_values = field_schema.get('allowedValues')
        if isinstance(allowed_values, dict) and allowed_values.get('href'):
            allowed_values = RemoteValuesLink.from_link(allowed_values, self.client)
        elif not isinstance(allowed_values, list):
            return None
        return OptionLoader(field_schema, allowed_values, self.cache, self.sorting, self.i18n, value)
