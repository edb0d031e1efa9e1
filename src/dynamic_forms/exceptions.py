class DynamicFormsException(Exception):
    """Helps the HTTP exception compute flows."""

    status_code = 500
    message = 'Internal Server Error'

    def __init__(self, message: str = None, status_code: int = None):
        if status_code:
            self.status_code = status_code
        if message:
            self.message = message
        super().__init__(self.message)


class SchemaMappingGap(DynamicFormsException):
    """No input definition matches the declared type of a field."""

    def __init__(self, field_type: str, field: dict = None):
        super().__init__(f'Could not find an input definition for a field with type "{field_type}"')
        self.field_type = field_type
        self.field = field


class OptionFetchFailure(DynamicFormsException):
    """The remote allowed values of a field couldn't be fetched."""
    status_code = 502

    def __init__(self, href: str, reason: str = None):
        super().__init__(f'Allowed values "{href}" not available: {reason or "unknown error"}')
        self.href = href


class FormValidationFailure(DynamicFormsException):
    """The backend rejected the form with field level errors."""
    status_code = 422

    def __init__(self, errors: list, response: dict = None, status_code: int = None):
        super().__init__('Form validation failed', status_code)
        self.errors = errors
        self.response = response
