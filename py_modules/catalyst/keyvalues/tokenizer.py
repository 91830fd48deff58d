"""
KeyValues tokenizer.

Turns raw VDF/ACF text into a flat list of tokens: open brace, close brace
and text (quoted or bare, already unescaped). Malformed input never raises
here; structural problems are reported by the parser.
"""

from typing import List, NamedTuple

OPEN = "open"
CLOSE = "close"
TEXT = "text"

BOM = "\ufeff"

# Escape sequences understood inside quoted strings. Any other escaped
# character stands for itself.
UNESCAPE = {
    "\\": "\\",
    '"': '"',
    "n": "\n",
    "r": "\r",
    "t": "\t",
}


class Token(NamedTuple):
    kind: str
    text: str = ""


def _is_space(char: str) -> bool:
    return char.isspace() or char == "\0"


def tokenize(text: str) -> List[Token]:
    """Split KeyValues text into tokens."""
    if text.startswith(BOM):
        text = text[1:]

    tokens: List[Token] = []
    length = len(text)
    i = 0

    while i < length:
        char = text[i]

        if _is_space(char):
            i += 1
            continue

        if char == "{":
            tokens.append(Token(OPEN))
            i += 1
            continue

        if char == "}":
            tokens.append(Token(CLOSE))
            i += 1
            continue

        if char == "/" and text.startswith("//", i):
            newline = text.find("\n", i)
            i = length if newline < 0 else newline + 1
            continue

        if char == '"':
            i += 1
            parts = []
            while i < length:
                char = text[i]
                if char == '"':
                    i += 1
                    break
                if char == "\\" and i + 1 < length:
                    escaped = text[i + 1]
                    if escaped != "\0":
                        parts.append(UNESCAPE.get(escaped, escaped))
                    i += 2
                    continue
                if char != "\0":
                    parts.append(char)
                i += 1
            tokens.append(Token(TEXT, "".join(parts)))
            continue

        # Bare (unquoted) token
        start = i
        while i < length and not text[i].isspace() and text[i] not in "{}":
            i += 1
        bare = text[start:i].replace("\0", "")
        if bare:
            tokens.append(Token(TEXT, bare))

    return tokens
