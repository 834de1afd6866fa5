"""Model picker entities: selectable options and the current selection snapshot."""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict

from whisperkey.l1_entities.model_catalog import KnownModel


class OptionKind(enum.Enum):
    KNOWN = 'known'
    LOCAL = 'local'
    BUNDLE_DEFAULT = 'bundle_default'


class ModelOption(BaseModel):
    """A selectable model. ``filename`` is relative to the models directory."""

    model_config = ConfigDict(frozen=True)

    kind: OptionKind
    display_name: str
    filename: str | None
    available: bool
    model: KnownModel | None = None

    @classmethod
    def bundle_default(cls) -> ModelOption:
        """The pseudo-option meaning "use whatever model the bundle ships"."""
        return cls(kind=OptionKind.BUNDLE_DEFAULT, display_name='Bundled default', filename=None, available=True)

    @property
    def menu_title(self) -> str:
        return self.display_name if self.available else f'{self.display_name} (download)'

    @property
    def needs_download(self) -> bool:
        return self.kind == OptionKind.KNOWN and not self.available


class ModelSelectionSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    options: list[ModelOption]
    selected_index: int | None
    path_description: str

    @property
    def selected_option(self) -> ModelOption | None:
        if self.selected_index is None or not 0 <= self.selected_index < len(self.options):
            return None
        return self.options[self.selected_index]
