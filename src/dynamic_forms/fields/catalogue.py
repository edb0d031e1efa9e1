"""Catalogue of the input templates, looked up by the field type."""
from copy import deepcopy
from typing import Callable, Iterable, List

from ..exceptions import SchemaMappingGap
from ..i18n import I18n
from ..schema import field_type, is_multi_select_field
from ..utils import get_by_path


def clearable(model, form_state, field) -> bool:
    return not field.get('templateOptions', {}).get('required')


def customize_select(field_schema: dict, config: dict) -> dict:
    """Multi select and "add new user" flags for select and numeric inputs."""
    template_options = dict(config.get('templateOptions', {}))
    if is_multi_select_field(field_schema):
        template_options['multiple'] = True
    if field_type(field_schema) == 'User':
        template_options['showAddNewUserButton'] = True
    return {'className': field_schema.get('name'), 'templateOptions': template_options}


def customize_formattable(field_schema: dict, config: dict) -> dict:
    return {
        'templateOptions': {
            **config.get('templateOptions', {}),
            'rtl': get_by_path(field_schema, 'options.rtl'),
            'name': field_schema.get('name'),
        },
    }


class InputType:
    """One entry of the catalogue: a template and the types it renders."""

    def __init__(self, config: dict, use_for_fields: Iterable[str], customize: Callable = None):
        self.config = config
        self.use_for_fields = frozenset(use_for_fields)
        self.customize = customize

    def matches(self, type_name: str) -> bool:
        return type_name in self.use_for_fields

    def field_config(self, field_schema: dict) -> dict:
        config = deepcopy(self.config)
        if self.customize:
            config.update(self.customize(field_schema, config))
        return config

    def __repr__(self):
        return f'<InputType {self.config.get("widgetType")}>'


SELECT_TYPES = ('Priority', 'Status', 'Type', 'User', 'Version', 'TimeEntriesActivity',
                'Category', 'CustomOption', 'Project')


def default_inputs(i18n: I18n) -> List[InputType]:
    select_default_value = {'name': i18n.t('placeholders.default')}
    return [
        InputType({'widgetType': 'textInput', 'templateOptions': {'type': 'text'}}, ['String']),
        InputType({'widgetType': 'textInput', 'templateOptions': {'type': 'password'}}, ['Password']),
        InputType({'widgetType': 'integerInput',
                   'templateOptions': {'type': 'number', 'locale': i18n.locale}},
                  ['Integer', 'Float'], customize_select),
        InputType({'widgetType': 'booleanInput', 'templateOptions': {'type': 'checkbox'}}, ['Boolean']),
        InputType({'widgetType': 'dateInput'}, ['Date', 'DateTime']),
        InputType({'widgetType': 'formattableInput', 'className': '',
                   'templateOptions': {'editorType': 'full', 'noWrapLabel': True}},
                  ['Formattable'], customize_formattable),
        InputType({'widgetType': 'selectInput',
                   'defaultValue': select_default_value,
                   'templateOptions': {
                       'type': 'number',
                       'locale': i18n.locale,
                       'bindLabel': 'name',
                       'searchable': True,
                       'virtualScroll': True,
                       'clearOnBackspace': False,
                       'clearSearchOnAdd': False,
                       'hideSelected': False,
                       'text': {'add_new_action': i18n.t('label_create')},
                   },
                   'expressionProperties': {'templateOptions.clearable': clearable}},
                  SELECT_TYPES, customize_select),
        InputType({'widgetType': 'selectProjectStatusInput',
                   'defaultValue': select_default_value,
                   'templateOptions': {
                       'type': 'number',
                       'locale': i18n.locale,
                       'bindLabel': 'name',
                       'searchable': True,
                   },
                   'expressionProperties': {'templateOptions.clearable': clearable}},
                  ['ProjectStatus'], customize_select),
    ]


class InputCatalogue:
    """Ordered registry of input types, the first matching entry wins."""

    def __init__(self, i18n: I18n = None, inputs: List[InputType] = None):
        self.inputs = list(inputs) if inputs is not None else default_inputs(i18n or I18n())

    def register(self, input_type: InputType, first: bool = False) -> InputType:
        if first:
            self.inputs.insert(0, input_type)
        else:
            self.inputs.append(input_type)
        return input_type

    def find(self, type_name: str) -> InputType | None:
        return next((i for i in self.inputs if i.matches(type_name)), None)

    def get_field_type_config(self, field_schema: dict) -> dict:
        """The customized template for the field, raises `SchemaMappingGap` if unknown."""
        type_name = field_type(field_schema)
        input_type = self.find(type_name)
        if not input_type:
            raise SchemaMappingGap(type_name, field_schema)
        return input_type.field_config(field_schema)
