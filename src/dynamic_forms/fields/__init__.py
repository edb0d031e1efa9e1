from .catalogue import InputCatalogue, InputType
from .groups import apply_expression_properties, get_form_with_field_groups, group_collapsed
from .service import DynamicFieldsService
