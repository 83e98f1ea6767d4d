"""Route values handed to a ``Switch``."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Route:
    """A route string plus an opaque state payload.

    The payload is never matched against; a variant field declared with
    ``state_field()`` receives it::

        Routes.switch(Route("/users/42", state=session))
    """

    route: str
    state: Any = None

    def __str__(self) -> str:
        return self.route
