from .field_kind import FieldKind as FieldKind
from .value_kind import ValueKind as ValueKind
from .on_empty import OnEmpty as OnEmpty
from .group_mode import GroupMode as GroupMode
