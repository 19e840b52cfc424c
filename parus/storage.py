"""The data stack and the lexicon of bindings."""

from __future__ import annotations

from dataclasses import dataclass, field

from .values import ParusError, Value, copy_value, format_value


@dataclass
class Stack:
    """The data stack; index 0 is the top."""

    items: list[Value] = field(default_factory=list)

    def push(self, value: Value) -> None:
        """Put a value on top of the stack."""
        self.items.append(value)

    def pull(self) -> Value:
        """Remove and return the top value."""
        if not self.items:
            raise ParusError("STACK UNDERFLOW")
        return self.items.pop()

    def _position(self, index: int) -> int:
        if not 0 <= index < len(self.items):
            raise IndexError(f"stack index {index} out of range")
        return len(self.items) - index - 1

    def get_at(self, index: int) -> Value:
        """Return a copy of the value at a depth counted from the top."""
        return copy_value(self.items[self._position(index)])

    def remove_at(self, index: int) -> None:
        """Delete the value at a depth counted from the top."""
        position = self._position(index)
        self.items.pop(position)

    def __len__(self) -> int:
        return len(self.items)

    def format(self) -> str:
        """Render the stack from bottom to top."""
        return "".join(f"{format_value(value)}, " for value in self.items)


@dataclass
class Lexicon:
    """Named bindings; a later definition shadows an earlier one."""

    entries: list[tuple[str, Value]] = field(default_factory=list)

    def define(self, name: str, value: Value) -> None:
        """Bind a value to a name."""
        self.entries.append((name, value))

    def _position(self, name: str) -> int | None:
        return next(
            (
                position
                for position in reversed(range(len(self.entries)))
                if self.entries[position][0] == name
            ),
            None,
        )

    def delete(self, name: str) -> None:
        """Remove the most recent binding of a name."""
        position = self._position(name)
        if position is None:
            raise ParusError(f"CANNOT DELETE AN UNDEFINED ENTRY - {name}")
        del self.entries[position]

    def get(self, name: str) -> Value:
        """Return a copy of the value bound to a name."""
        position = self._position(name)
        if position is None:
            raise ParusError(f"UNDEFINED ENTRY - {name}")
        return copy_value(self.entries[position][1])

    def format(self) -> str:
        """Render every binding, one per line."""
        return "".join(f"{name} : {format_value(value)}\n" for name, value in self.entries)