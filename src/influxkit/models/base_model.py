import pydantic


class BaseModel(pydantic.BaseModel):
    """
    Common base class of every influxkit model.

    Unknown keyword arguments are rejected so that misspelled parameters
    (e.g. `onEmpty=` instead of `on_empty=`) fail loudly at construction.
    """

    model_config = pydantic.ConfigDict(extra="forbid")
