"""Port: persisted key-value settings."""

from __future__ import annotations

from typing import Protocol


class SettingsStore(Protocol):
    """Abstract settings backend. Only the selected-model key is part of the contract."""

    @property
    def selected_model_filename(self) -> str | None:
        """Relative filename of the chosen model, or None for the bundle default."""
        ...

    @selected_model_filename.setter
    def selected_model_filename(self, value: str | None) -> None: ...
