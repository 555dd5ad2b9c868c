from typing import Optional


class Cursor:
    """Sequential reader over the text of a single symbol.

    The absolute position can be saved and restored, which is how backreferences
    re-enter an earlier part of the symbol.
    """

    def __init__(self, text: str, position: int = 0) -> None:
        self.text = text
        self._pos = position

    @property
    def position(self) -> int:
        return self._pos

    @position.setter
    def position(self, value: int) -> None:
        self._pos = value

    def __len__(self):
        return len(self.text)

    def at_end(self) -> bool:
        return self._pos >= len(self.text)

    def peek(self) -> Optional[str]:
        if self.at_end():
            return None
        return self.text[self._pos]

    def consume(self) -> Optional[str]:
        if self.at_end():
            return None
        ch = self.text[self._pos]
        self._pos += 1
        return ch

    def take(self, ch: str) -> bool:
        if self.peek() == ch:
            self._pos += 1
            return True
        return False

    def offset(self, delta: int) -> None:
        self._pos += delta

    def remaining(self) -> str:
        return self.text[self._pos:]
