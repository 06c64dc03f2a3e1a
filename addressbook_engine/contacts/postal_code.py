"""
Postal-code validation.

The accepted shape is a two-part routing-key code: three non-space
characters, one space, four non-space characters (``"A65 F4E2"``). An empty
code is allowed, since the field is optional. The check is syntax-only.
"""

from __future__ import annotations

from ..errors import ValidationError

POSTAL_CODE_LENGTH = 8
SEPARATOR_INDEX = 3

POSTAL_CODE_HINT = "It should contain a 2 part code with 7 characters.\nExample: A65 F4E2"


def is_postal_code_valid(code: str) -> bool:
    """
    Return True if `code` is empty or "XXX XXXX" shaped.

    Parameters
    ----------
    code:
        Raw postal code as typed by the user. It is not stripped.

    Returns
    -------
    bool
        True when the code is empty, or exactly 8 characters with a space at
        index 3 and no space anywhere else.
    """
    if code == "":
        return True
    if len(code) != POSTAL_CODE_LENGTH:
        return False
    return all(
        (ch == " ") if idx == SEPARATOR_INDEX else (ch != " ") for idx, ch in enumerate(code)
    )


def require_valid_postal_code(code: str) -> None:
    """
    Raise ValidationError unless `code` passes is_postal_code_valid.
    """
    if not is_postal_code_valid(code):
        raise ValidationError(f"Postal code {code!r} has the wrong format.\n{POSTAL_CODE_HINT}")
