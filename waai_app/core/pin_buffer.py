"""Fixed-length digit buffer shared by every PIN entry surface."""

from __future__ import annotations

from waai_app.constants.quiz_constants import PIN_LENGTH
from waai_app.core.errors import ValidationError

MASK_CHARACTER = "•"


class PinBuffer:
    """Collects digits up to a fixed length; display masking is left to the caller."""

    def __init__(self, length: int = PIN_LENGTH) -> None:
        if length <= 0:
            raise ValueError("PIN length must be positive.")
        self._length = length
        self._digits: list[str] = []

    @property
    def length(self) -> int:
        return self._length

    @property
    def value(self) -> str:
        return "".join(self._digits)

    @property
    def is_complete(self) -> bool:
        return len(self._digits) == self._length

    def append(self, digit: int | str) -> bool:
        """Add one digit and return True once the buffer is full."""
        text = str(digit)
        if len(text) != 1 or not (text.isascii() and text.isdigit()):
            raise ValidationError("PIN entries must be single digits 0-9.")
        if not self.is_complete:
            self._digits.append(text)
        return self.is_complete

    def backspace(self) -> None:
        if self._digits:
            self._digits.pop()

    def clear(self) -> None:
        self._digits.clear()

    def masked(self) -> str:
        """Entered digits as mask characters, padded with underscores."""
        filled = MASK_CHARACTER * len(self._digits)
        return filled + "_" * (self._length - len(self._digits))

    def __len__(self) -> int:
        return len(self._digits)
