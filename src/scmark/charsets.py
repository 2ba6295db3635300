"""Character sets for O(1) classification.

All sets are frozensets for:
- O(1) membership testing (vs O(n) for strings)
- Immutability (thread-safe)
- Module-level caching (no per-call allocation)

Classification is ASCII-only: a non-ASCII letter is never part of a
function name or argument key.

Usage:
    from scmark.charsets import NAME_CHARS

    if char in NAME_CHARS:  # O(1) lookup
        ...
"""

import string

# Function names and argument keys: letters, digits, underscore
NAME_CHARS: frozenset[str] = frozenset(string.ascii_letters + string.digits + "_")

# "Numbers" are taken on the honor system: any run of these is accepted
NUMBER_CHARS: frozenset[str] = frozenset(string.digits + ".-")

# ASCII whitespace only; other Unicode spaces are ordinary text
WHITESPACE: frozenset[str] = frozenset(" \t\n\r\f\v")

BACKSLASH = "\\"
QUOTE = '"'
OPEN_PAREN = "("
CLOSE_PAREN = ")"
OPEN_BRACE = "{"
CLOSE_BRACE = "}"
EQUALS = "="
COMMA = ","
