"""
Character classes for the convenience pattern checks of the `ValidationContext`.
"""

_ACCENTED_LETTERS = "ñÑáéíóúÁÉÍÓÚàèìòùÀÈÌÒÙäëïöüÄËÏÖÜ"

NO_WHITESPACE = r"[^ \t\n\x0b\f\r]+"
NO_DIGITS = r"[^0-9]+"
LETTERS_DIGITS_SPACES = f"[0-9A-Za-z{_ACCENTED_LETTERS}' ]+"
LETTERS_DIGITS = f"[0-9A-Za-z{_ACCENTED_LETTERS}']+"
LETTERS_SPACES = f"[A-Za-z{_ACCENTED_LETTERS}' ]+"
LETTERS = f"[A-Za-z{_ACCENTED_LETTERS}]+"
SAFE_TEXT = "[^<>\"']+"

# strict number grammars: no surrounding whitespace, no underscores, no NaN/Infinity
INTEGER = r"[+-]?[0-9]+"
DECIMAL = r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
ISO_DATE = r"[0-9]{4}-[0-9]{2}-[0-9]{2}"
ISO_TIME = r"[0-9]{2}:[0-9]{2}:[0-9]{2}"
