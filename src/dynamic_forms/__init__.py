from .app_config import FormsApplication, default_config, setup_application
from .exceptions import (DynamicFormsException, FormValidationFailure, OptionFetchFailure,
                         SchemaMappingGap)
from .fields import DynamicFieldsService, InputCatalogue, InputType
from .forms import FormControl, FormGroup, FormsService, FormTransport
from .i18n import I18n
from .options import Collection, OptionCache, OptionLoader, RedisOptionCache, RemoteValuesLink
