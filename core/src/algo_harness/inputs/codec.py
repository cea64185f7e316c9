from __future__ import annotations

from algo_harness.errors import IllegalCharacterError

# Marks "no delimiter"; never a real separator, quote or escape character.
NO_CHARACTER = "\0"

_NAMED_CHARACTERS: dict[str, str] = {
    "\\t": "\t",
    "tab": "\t",
    "' '": " ",
    '" "': " ",
    "space": " ",
    "semicolon": ";",
    "comma": ",",
    "pipe": "|",
    "double": '"',
    "single": "'",
    "none": NO_CHARACTER,
}


def to_char(token: str | None) -> str:
    """Map a separator/quote/escape token from the command line to a single character."""
    if not token:
        return NO_CHARACTER
    if len(token) == 1:
        return token
    try:
        return _NAMED_CHARACTERS[token]
    except KeyError:
        raise IllegalCharacterError(f"Illegal character specification: {token}") from None
