"""Grouping of the field configs into collapsible field groups."""
from typing import Any, Callable, Dict, List

from ..utils import set_by_path

GROUP_WIDGET = 'fieldGroup'


def flatten_fields(form_fields: List[dict]) -> List[dict]:
    """Remove any previous grouping."""
    ret = []
    for form_field in form_fields:
        if form_field.get('fieldGroup'):
            ret.extend(flatten_fields(form_field['fieldGroup']))
        else:
            ret.append(form_field)
    return ret


def _matches(field_group: dict, form_field: dict) -> bool:
    if not form_field.get('key'):
        return False
    fields_filter: Callable | None = field_group.get('fieldsFilter')
    return not fields_filter or bool(fields_filter(form_field))


def field_has_errors(form_field: dict) -> bool:
    control = form_field.get('formControl')
    return bool(control is not None and control.errors)


def group_collapsed(field_group: dict, submitted: bool) -> bool:
    """A group stays collapsed unless a visible member has errors on a submitted form."""
    return not (submitted and any(
        field_has_errors(f) and not f.get('hide') for f in field_group.get('fieldGroup') or ()))


def collapsible_field_groups_collapsed(model: Any, form_state: dict, field: dict) -> bool | None:
    template_options = field.get('templateOptions') or {}
    if (field.get('widgetType') != GROUP_WIDGET
            or not template_options.get('collapsibleFieldGroups')
            or not template_options.get('collapsibleFieldGroupsCollapsed')):
        return None
    return group_collapsed(field, bool((form_state or {}).get('submitted')))


def get_default_field_group_settings(field_group: dict, members: List[dict]) -> dict:
    return {
        'widgetType': GROUP_WIDGET,
        'wrappers': ['dynamic-field-group-wrapper'],
        'fieldGroupClassName': 'dynamic-form--fieldset',
        'templateOptions': {
            'label': field_group.get('name'),
            'isFieldGroup': True,
            'collapsibleFieldGroups': True,
            'collapsibleFieldGroupsCollapsed': True,
        },
        'fieldGroup': members,
        'expressionProperties': {
            'templateOptions.collapsibleFieldGroupsCollapsed': collapsible_field_groups_collapsed,
        },
    }


def _with_settings(group: dict, settings: dict | None) -> dict:
    if not settings:
        return group
    return {
        **group,
        'templateOptions': {**group['templateOptions'], **(settings.get('templateOptions') or {})},
        'expressionProperties': {**group['expressionProperties'], **(settings.get('expressionProperties') or {})},
    }


def get_form_with_field_groups(field_groups: List[dict] = None, form_fields: List[dict] = None) -> List[dict]:
    """Split `form_fields` between the top level and the non empty `field_groups`.

    Each field lands in the first group whose `fieldsFilter` accepts it, the
    remaining ones stay on top, in their original order, before the groups.
    """
    remaining = flatten_fields(form_fields or [])
    groups = []
    for field_group in field_groups or ():
        members = [f for f in remaining if _matches(field_group, f)]
        if not members:
            continue
        claimed = set(map(id, members))
        remaining = [f for f in remaining if id(f) not in claimed]
        group = get_default_field_group_settings(field_group, members)
        groups.append(_with_settings(group, field_group.get('settings')))
    return [*remaining, *groups]


def apply_expression_properties(fields: List[dict], model: Any = None, form_state: Dict = None) -> List[dict]:
    """Evaluate the `expressionProperties` of every field, members before their group."""
    for field in fields:
        if field.get('fieldGroup'):
            apply_expression_properties(field['fieldGroup'], model, form_state)
        for path, expression in (field.get('expressionProperties') or {}).items():
            value = expression(model, form_state or {}, field)
            if value is not None:
                set_by_path(field, path, value)
    return fields
