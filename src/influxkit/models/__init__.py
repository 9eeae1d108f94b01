from .base_model import BaseModel as BaseModel
from .time import Time as Time
from .field import Field as Field
from .measurement import (
    Measurement as Measurement,
    MeasurementBuilder as MeasurementBuilder,
)
