import logging
from typing import Dict, Iterable, List

import httpx
from click import style
from orjson import JSONDecodeError, loads

from ..exceptions import FormValidationFailure
from ..utils import get_by_path, link_href
from .controls import FormGroup
from .errors import (extract_wire_errors, get_all_form_validation_errors, get_formatted_errors,
                     set_form_validation_errors)
from .transport import FormTransport

log = logging.getLogger('DynamicForms')


def _reference(resource) -> dict:
    return {'href': link_href(resource)}


def format_model_to_submit(form_model: dict) -> dict:
    """Reduce every relation of the model to `{href}`.

    Relations come either as links from the payload or as whole resources
    picked among the allowed values.
    """
    form_model = form_model or {}
    resources = form_model.get('_links') or {}
    formatted = {
        key: list(map(_reference, resource)) if isinstance(resource, list) else _reference(resource)
        for key, resource in resources.items()
    }
    return {**form_model, '_links': formatted}


class FormsService:
    """Submission and backend validation of the dynamic forms."""

    def __init__(self, transport: FormTransport, validation_status: int = 422):
        self.transport = transport
        self.validation_status = validation_status

    format_model_to_submit = staticmethod(format_model_to_submit)

    async def submit(self, form: FormGroup | dict, resource_endpoint: str,
                     resource_id: str = None, form_http_method: str = None) -> dict | None:
        """Create or update the resource, mapping the validation errors back on `form`."""
        values = form.get_raw_value() if isinstance(form, FormGroup) else form
        model_to_submit = format_model_to_submit(values)
        if isinstance(form, FormGroup):
            form.submitted = True
        if resource_id:
            url, http_method = f'{resource_endpoint}/{resource_id}', 'patch'
        else:
            url, http_method = resource_endpoint, (form_http_method or 'post')
        try:
            if http_method == 'patch':
                return await self.transport.update(url, model_to_submit)
            if http_method == 'post':
                return await self.transport.create(url, model_to_submit)
            return await self.transport.request(http_method, url, model_to_submit)
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code != self.validation_status:
                raise
            body = self._error_body(exc.response)
            errors = self.handle_backend_form_validation_errors(body, form)
            raise FormValidationFailure(errors, body, exc.response.status_code) from exc

    async def validate(self, form: FormGroup, resource_endpoint: str) -> List[dict]:
        """Ask the `/form` endpoint for the errors of `form` and attach them."""
        model_to_submit = format_model_to_submit(form.value)
        response = await self.transport.create(f'{resource_endpoint}/form', model_to_submit) or {}
        validation_errors = get_by_path(response, '_embedded.validationErrors') or {}
        return set_form_validation_errors(get_formatted_errors(validation_errors), form)

    async def get_isolated_validation_errors(self, form_value: dict, resource_endpoint: str,
                                             limit_validation_to_keys: str | Iterable[str] = None) -> Dict[str, str]:
        """The validation errors of `form_value`, without touching any live form."""
        model_to_submit = format_model_to_submit(form_value)
        response = await self.transport.create(resource_endpoint, model_to_submit) or {}
        return get_all_form_validation_errors(
            get_by_path(response, '_embedded.validationErrors'), limit_validation_to_keys)

    def handle_backend_form_validation_errors(self, body, form: FormGroup | dict) -> List[dict]:
        errors = get_formatted_errors(extract_wire_errors(body))
        log.info('form rejected with %s validation errors', style(str(len(errors)), fg='red'))
        if isinstance(form, FormGroup):
            set_form_validation_errors(errors, form)
        return errors

    @staticmethod
    def _error_body(response: httpx.Response):
        try:
            return loads(response.content)
        except JSONDecodeError:
            return {}
