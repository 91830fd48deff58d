"""
KeyValues serializer.

Output is deterministic: one tab per depth level, every key and leaf value
quoted, a single tab between a key and its leaf value. Parsing the output
gives back the same tree, but comments and the hand formatting of the
original file are not kept. Callers that rewrite files written by Steam
accept that loss.
"""

from typing import List

from .document import KVObject

ESCAPE = str.maketrans({
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
})


def escape(text: str) -> str:
    return text.translate(ESCAPE)


def dumps(document: KVObject) -> str:
    """Serialize a document to KeyValues text."""
    lines: List[str] = []
    _emit(document, 0, lines)
    return "".join(lines)


def _emit(obj: KVObject, depth: int, out: List[str]) -> None:
    indent = "\t" * depth
    for key, value in obj:
        if isinstance(value, KVObject):
            out.append(f'{indent}"{escape(key)}"\n{indent}{{\n')
            _emit(value, depth + 1, out)
            out.append(f"{indent}}}\n")
        else:
            out.append(f'{indent}"{escape(key)}"\t"{escape(value)}"\n')
