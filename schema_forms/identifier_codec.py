"""
Identifier codec for schema forms.

Every rendered control is addressed by a flat identifier built from its path
through the schema. A '.' descends into an object field and a '-N' suffix on
a segment addresses the N-th repetition of an array element:

    things.thing_attribute-0
    welp-1.womp.welp-2.wilp

The encode helpers compose identifiers while rendering, and tokenize() walks
an identifier back into field and index tokens while parsing.
"""

import re
import logging
from typing import List, NamedTuple, Optional, Sequence, Union

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = "."
INDEX_SEPARATOR = "-"

# '-12' in 'welp-12.womp', with the dot that may follow it
_SPLIT_REGEX = re.compile(r'-([0-9]+)[.]?')

# Every array suffix, like the '-12' in 'welp-12'
_INDEX_SUFFIX_REGEX = re.compile(r'-[0-9]+')

# Field names that would collide with either separator
_AMBIGUOUS_NAME_REGEX = re.compile(r'[.]|-[0-9]')

FIELD = "field"
INDEX = "index"


class Token(NamedTuple):
    """A single step of a decoded identifier."""
    kind: str
    value: Union[str, int]

    @property
    def is_index(self) -> bool:
        return self.kind == INDEX


def join_path(prefix: Optional[str], name: str) -> str:
    """Append an object field segment to an identifier prefix."""
    if not prefix:
        return name
    return f"{prefix}{FIELD_SEPARATOR}{name}"


def with_index(segment: str, index: int) -> str:
    """Append a repetition suffix to a segment."""
    if index < 0:
        raise ValueError(f"Array index must be non-negative, got {index}")
    return f"{segment}{INDEX_SEPARATOR}{index}"


def encode(parts: Sequence[Union[str, int]]) -> str:
    """
    Build an identifier from field names and array indices.

    Args:
        parts: Field names (str) and indices (int) in walk order

    Returns:
        Identifier string, e.g. ['welp', 1, 'womp'] -> 'welp-1.womp'
    """
    identifier = ""
    for part in parts:
        if isinstance(part, int):
            if not identifier:
                raise ValueError("An identifier cannot start with an array index")
            identifier = with_index(identifier, part)
        else:
            identifier = join_path(identifier, part)
    return identifier


def is_valid_field_name(name: str) -> bool:
    """Check that a schema field name cannot be confused with a separator."""
    return bool(name) and not _AMBIGUOUS_NAME_REGEX.search(name)


def tokenize(identifier: str) -> List[Token]:
    """
    Split an identifier into an ordered walk of field and index tokens.

    The identifier is split on '-N' suffixes (with an optional trailing dot);
    the captured digit runs become index tokens and the remaining pieces are
    split on '.' into field tokens. Empty artifacts of the split are dropped.

    Example:
        'welp-1.womp.welp-2.wilp'
            => welp, 1, womp, welp, 2, wilp

    Args:
        identifier: Identifier of a rendered control

    Returns:
        List of tokens in walk order
    """
    tokens: List[Token] = []
    pieces = _SPLIT_REGEX.split(identifier)

    # re.split puts captured groups at odd positions
    for position, piece in enumerate(pieces):
        if not piece:
            continue
        if position % 2 == 1:
            tokens.append(Token(INDEX, int(piece)))
            continue
        for name in piece.split(FIELD_SEPARATOR):
            if name:
                tokens.append(Token(FIELD, name))

    logger.debug(f"Tokenized {identifier!r} into {[token.value for token in tokens]}")
    return tokens


def decode(identifier: str) -> List[Union[str, int]]:
    """Return the plain token values of an identifier."""
    return [token.value for token in tokenize(identifier)]


def strip_indices(identifier: str) -> str:
    """Remove every array suffix, e.g. 'welp-12.womp-4' -> 'welp.womp'."""
    return _INDEX_SUFFIX_REGEX.sub('', identifier)


def get_field_path(identifier: str) -> List[str]:
    """
    Resolve an identifier to its path through the schema.

    Example:
        'welp-12.welp_subfield.womp-4' => ['welp', 'welp_subfield', 'womp']
    """
    return strip_indices(identifier).split(FIELD_SEPARATOR)
