from .controls import FormControl, FormGroup
from .errors import find_control, get_formatted_errors, set_form_validation_errors
from .service import FormsService, format_model_to_submit
from .transport import FormTransport
