"""
Recursive-descent KeyValues parser.

Every level of a document is a sequence of ``key value`` pairs where the
value is either a text token or a brace-delimited nested object. The
top-level entries form an implicit root object.
"""

from typing import List, Tuple

from ..errors import MalformedDocument
from .document import KVObject
from .tokenizer import CLOSE, OPEN, TEXT, Token, tokenize


def parse_tokens(tokens: List[Token]) -> KVObject:
    """Build a document from a token list.

    Raises:
        MalformedDocument: On a brace where a key is expected, a key without
            a value, or tokens left over after the top level was closed.
    """
    root, pos, closed = _parse_object(tokens, 0)
    if closed and pos < len(tokens):
        raise MalformedDocument("Unexpected trailing tokens after document end", position=pos)
    return root


def parse(text: str) -> KVObject:
    """Parse KeyValues text into a document."""
    return parse_tokens(tokenize(text))


def _parse_object(tokens: List[Token], pos: int) -> Tuple[KVObject, int, bool]:
    """Parse entries until a matching close brace or end of input.

    Returns (object, next position, closed by brace).
    """
    obj = KVObject()
    count = len(tokens)

    while pos < count:
        token = tokens[pos]

        if token.kind == CLOSE:
            return obj, pos + 1, True

        if token.kind == OPEN:
            raise MalformedDocument("Unexpected '{' where a key was expected", position=pos)

        key = token.text
        pos += 1
        if pos >= count:
            raise MalformedDocument("Missing value at end of input", position=pos, key=key)

        value_token = tokens[pos]
        if value_token.kind == TEXT:
            obj.append(key, value_token.text)
            pos += 1
        elif value_token.kind == OPEN:
            child, pos, _ = _parse_object(tokens, pos + 1)
            obj.append(key, child)
        else:
            raise MalformedDocument("Missing value before '}'", position=pos, key=key)

    # Unclosed objects at end of input are closed implicitly
    return obj, pos, False
