"""
KeyValues (VDF) text format: document model, tokenizer, parser, serializer
and case-insensitive path helpers.
"""

from .document import KVObject, Value, is_leaf, is_object
from .tokenizer import CLOSE, OPEN, TEXT, Token, tokenize
from .parser import parse, parse_tokens
from .serializer import dumps, escape
from .paths import (
    ensure_path,
    find,
    find_all_objects,
    find_leaf,
    find_leaf_deep,
    find_object,
    find_path,
    remove_entry,
    set_leaf,
)
from .files import load_document, read_text, save_document
