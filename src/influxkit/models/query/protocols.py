from typing import Protocol, runtime_checkable


@runtime_checkable
class StageProtocol(Protocol):
    """
    Structural protocol for objects that can be appended to a
    [`Query`][influxkit.models.query.builders.Query].

    A class implicitly satisfies this protocol if it renders itself to the text
    of a single pipeline step via `render()`. All the descriptors in
    [`stages`][influxkit.models.query.stages] are reference implementations,
    but user-defined stages (e.g. for Flux functions not covered by this SDK)
    only need to provide the method below.
    """

    def render(self) -> str:
        """
        Returns the text of one pipeline step, without the leading `|>`.
        """
        ...
