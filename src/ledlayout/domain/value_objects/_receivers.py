"""Receiver card value objects.

A cabinet exposes zero, one or two receiver cards. Each card is an
independently addressable data endpoint when the cabinet has two.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


DEFAULT_RECEIVER_CARD_MODEL = "5A75-E"


class ReceiverCardKind(str, Enum):
    """Which receiver card model a cabinet shows.

    - DEFAULT: inherit the project-wide model
    - HIDDEN: no card shown for this cabinet
    - CUSTOM: a cabinet-specific model id
    """

    DEFAULT = "default"
    HIDDEN = "hidden"
    CUSTOM = "custom"


@dataclass(frozen=True)
class ReceiverCardOverride:
    """Per-cabinet receiver card override.

    Use the ``default()``, ``hidden()`` and ``custom()`` constructors
    rather than building instances by hand.
    """

    kind: ReceiverCardKind = ReceiverCardKind.DEFAULT
    model: str | None = None

    def __post_init__(self) -> None:
        if self.kind == ReceiverCardKind.CUSTOM:
            if not self.model or not self.model.strip():
                raise ValueError("Custom receiver card override needs a model")
        elif self.model is not None:
            raise ValueError(f"{self.kind.value} override cannot carry a model")

    @classmethod
    def default(cls) -> "ReceiverCardOverride":
        return cls(ReceiverCardKind.DEFAULT)

    @classmethod
    def hidden(cls) -> "ReceiverCardOverride":
        return cls(ReceiverCardKind.HIDDEN)

    @classmethod
    def custom(cls, model: str) -> "ReceiverCardOverride":
        return cls(ReceiverCardKind.CUSTOM, model.strip())

    @property
    def is_default(self) -> bool:
        return self.kind == ReceiverCardKind.DEFAULT

    @property
    def is_hidden(self) -> bool:
        return self.kind == ReceiverCardKind.HIDDEN


@dataclass(frozen=True)
class Endpoint:
    """A data route endpoint: a cabinet, optionally narrowed to one card.

    ``card_index`` is None for a single-card cabinet, 0 or 1 for the
    first or second card of a dual-card cabinet.
    """

    cabinet_id: str
    card_index: int | None = None

    def __post_init__(self) -> None:
        if self.card_index is not None and self.card_index not in (0, 1):
            raise ValueError(f"Card index must be 0 or 1, got {self.card_index}")
