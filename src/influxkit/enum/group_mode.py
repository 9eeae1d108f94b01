from enum import StrEnum


class GroupMode(StrEnum):
    """
    How the `columns` of a `group()` stage are interpreted.
    """

    By = "by"
    """Group by the listed columns."""

    Except = "except"
    """Group by every column except the listed ones."""
