from enum import StrEnum


class OnEmpty(StrEnum):
    """
    What a `filter()` stage does with tables left empty by its predicate.
    """

    Keep = "keep"
    """Keep empty tables in the output stream."""

    Drop = "drop"
    """Remove empty tables from the output stream."""
