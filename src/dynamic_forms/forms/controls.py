from typing import Any, Dict, Iterable, List

from ..fields.groups import flatten_fields
from ..utils import get_by_path


class FormControl:
    """The live value and errors of one field."""

    def __init__(self, value: Any = None):
        self.value = value
        self.errors: dict | None = None

    def set_errors(self, errors: dict | None) -> None:
        self.errors = errors or None

    @property
    def valid(self) -> bool:
        return not self.errors

    def get_raw_value(self) -> Any:
        return self.value

    def __repr__(self):
        return f'<FormControl {self.value!r} errors={self.errors}>'


class FormGroup:
    """A tree of controls addressed by dotted keys like `_links.assignee`."""

    def __init__(self, controls: Dict[str, 'FormControl | FormGroup'] = None):
        self.controls = dict(controls or {})
        self.errors: dict | None = None
        self.submitted = False

    @classmethod
    def from_fields(cls, fields: List[dict], model: dict = None) -> 'FormGroup':
        """Builds the controls of `fields` and binds them to the field configs."""
        form = cls()
        for field in flatten_fields(fields):
            key = field.get('key')
            if not key:
                continue
            control = form.add_control(key, FormControl(get_by_path(model or {}, key)))
            field['formControl'] = control
        return form

    def add_control(self, path: str, control: 'FormControl | FormGroup'):
        *branches, leaf = path.split('.')
        group = self
        for part in branches:
            group = group.controls.setdefault(part, FormGroup())
        group.controls[leaf] = control
        return control

    def get(self, path: str | Iterable[str]) -> 'FormControl | FormGroup | None':
        parts = path.split('.') if isinstance(path, str) else path
        current = self
        for part in parts:
            if not isinstance(current, FormGroup):
                return None
            current = current.controls.get(part)
            if current is None:
                return None
        return current

    def set_errors(self, errors: dict | None) -> None:
        self.errors = errors or None

    @property
    def valid(self) -> bool:
        return not self.errors and all(c.valid for c in self.controls.values())

    def get_raw_value(self) -> dict:
        return {name: control.get_raw_value() for name, control in self.controls.items()}

    @property
    def value(self) -> dict:
        return self.get_raw_value()

    def __repr__(self):
        return f'<FormGroup {list(self.controls)}>'
