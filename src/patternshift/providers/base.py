"""Text-generation provider interface."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class TextGenerator(Protocol):
    """Anything that turns a prompt into a completion.

    Implementations raise :class:`~patternshift.core.errors.GenerationError`
    when the backend fails, never return an error string in place of text.
    """

    def complete(self, prompt: str) -> str:
        ...
