from __future__ import annotations

import pytest

from addressbook_engine.contacts.postal_code import is_postal_code_valid, require_valid_postal_code
from addressbook_engine.errors import ValidationError


@pytest.mark.parametrize("code", ["", "A65 F4E2", "D02 X285", "123 4567"])
def test_valid_postal_codes(code: str) -> None:
    assert is_postal_code_valid(code)


@pytest.mark.parametrize(
    "code",
    [
        "A65F4E2",  # 7 chars, no separator
        "A65  4E2",  # space at position 4
        "A6  F4E2",  # space at position 2
        " 65 F4E2",  # space at position 0
        "A65 F4E ",  # space at position 7
        "A65-F4E2",  # non-space at position 3
        "A65 F4E22",  # 9 chars
        " ",
        "        ",
    ],
)
def test_invalid_postal_codes(code: str) -> None:
    assert not is_postal_code_valid(code)


def test_require_valid_postal_code_raises_with_example() -> None:
    with pytest.raises(ValidationError) as excinfo:
        require_valid_postal_code("A65F4E2")
    assert "A65 F4E2" in str(excinfo.value)


def test_require_valid_postal_code_accepts_empty() -> None:
    require_valid_postal_code("")
