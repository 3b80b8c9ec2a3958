"""Base move abstraction."""

from __future__ import annotations

from abc import ABC
from dataclasses import fields, is_dataclass
from typing import Any, ClassVar, Mapping, Self

from .serialize import to_serializable


class Move(ABC):
    """A typed command submitted by a seat."""

    move_type: ClassVar[str] = "Move"

    def to_dict(self) -> dict[str, Any]:
        """Return the move as a JSON payload tagged with its `type`."""
        if is_dataclass(self):
            payload = {field.name: to_serializable(getattr(self, field.name)) for field in fields(self)}
        else:
            payload = {
                key: to_serializable(value)
                for key, value in vars(self).items()
                if not key.startswith("_")
            }
        payload["type"] = self.move_type
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        """Build the move from a payload, ignoring the type discriminator."""
        kwargs = {key: value for key, value in data.items() if key not in {"type", "move_type"}}
        return cls(**kwargs)  # type: ignore[misc, call-arg]
