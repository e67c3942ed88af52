"""
Control value lookup used when parsing a submitted form.

The host toolkit owns the live controls. The parser only needs to ask it for
the current value under an identifier and to learn when no such control
exists, which is how the end of a repeated array is detected.
"""

import logging
from typing import Any, Iterable, Mapping, Optional, Protocol

from .exceptions import ControlNotFoundError

logger = logging.getLogger(__name__)


class ControlValueSource(Protocol):
    """Capability to read the live value of a rendered control."""

    def current_value(self, identifier: str) -> Any:
        """Return the control's value or raise ControlNotFoundError."""
        ...


class MappingValueSource:
    """
    Value source backed by a plain mapping of identifier to value.

    Useful for headless hosts and tests. When live_identifiers is given,
    only those identifiers are treated as rendered, even if the mapping
    still holds stale values for removed rows.
    """

    def __init__(self, values: Mapping[str, Any], live_identifiers: Optional[Iterable[str]] = None):
        self.values = values
        self.live_identifiers = set(live_identifiers) if live_identifiers is not None else None

    def current_value(self, identifier: str) -> Any:
        if self.live_identifiers is not None and identifier not in self.live_identifiers:
            raise ControlNotFoundError(identifier)
        if identifier not in self.values:
            raise ControlNotFoundError(identifier)
        return self.values[identifier]
