"""Correlation of the backend validation errors with the form controls.

A wire error looks like::

    {"_type": "Error", "message": "Subject can't be blank.",
     "_embedded": {"details": {"attribute": "subject"}}}

Several of them come wrapped in `{"_embedded": {"errors": [...]}}`.
"""
import logging
from typing import Dict, Iterable, List

from click import style

from ..utils import get_by_path
from .controls import FormGroup

log = logging.getLogger('DynamicForms')


def extract_wire_errors(body) -> list:
    """The list of error objects of an error response body."""
    if isinstance(body, list):
        return body
    if not isinstance(body, dict):
        return []
    return get_by_path(body, '_embedded.errors') or [body]


def _iter_errors(errors):
    if isinstance(errors, dict):
        # a validation errors map: attribute -> error
        return ((name, err) for name, err in errors.items())
    return ((None, err) for err in errors or ())


def get_formatted_errors(errors: Iterable[dict] | Dict[str, dict]) -> List[dict]:
    """Returns the `{key, message}` pairs of the wire `errors`."""
    return [
        {'key': get_by_path(err, '_embedded.details.attribute') or name, 'message': err.get('message')}
        for name, err in _iter_errors(errors)
        if isinstance(err, dict)
    ]


def direct_control(form: FormGroup, key: str):
    return form.get(key) if key else None


def relations_control(form: FormGroup, key: str):
    relations = form.get('_links')
    if not key or not isinstance(relations, FormGroup):
        return None
    return relations.get(key)


def find_control(form: FormGroup, key: str):
    """The control addressed by `key`, or the relation with that name."""
    control = direct_control(form, key)
    if control is None:
        control = relations_control(form, key)
    return control


def set_form_validation_errors(errors: List[dict], form: FormGroup) -> List[dict]:
    for error in errors:
        control = find_control(form, error['key'])
        if control is None:
            log.debug('no control for validation error on %s, dropped', style(str(error['key']), fg='yellow'))
            continue
        control.set_errors({error['key']: {'message': error['message']}})
    return errors


def get_all_form_validation_errors(validation_errors, form_control_keys: str | Iterable[str] = None) -> Dict[str, str]:
    """Returns the key -> message map of the errors, limited to `form_control_keys`."""
    if isinstance(form_control_keys, str):
        form_control_keys = [form_control_keys]
    keys = set(form_control_keys) if form_control_keys is not None else None
    return {
        error['key']: error['message']
        for error in get_formatted_errors(validation_errors or [])
        if keys is None or error['key'] in keys
    }
