"""ModelSelectionStore: model picker state backed by an injected settings store."""

from __future__ import annotations

import logging
from pathlib import Path

from whisperkey.l1_entities.bundle import BundleHandle
from whisperkey.l1_entities.model_catalog import BASE_MODEL_ID, KNOWN_MODELS, KnownModel
from whisperkey.l1_entities.model_option import ModelOption, ModelSelectionSnapshot, OptionKind
from whisperkey.l2_use_cases.ports.settings_store import SettingsStore
from whisperkey.l3_interface_adapters.gateways.path_sanitizer import ModelSelectionValidator

log = logging.getLogger('wk.selection')

MODEL_SUFFIX = '.bin'


class ModelSelectionStore:
    """Builds the model option list and turns the persisted choice into a safe path.

    A bad persisted selection never raises: it is cleared, a one-shot notice is
    queued for ``drain_notice()``, and the bundle default is used instead.
    Single writer; not meant for concurrent mutation.
    """

    def __init__(
        self,
        settings: SettingsStore,
        catalog: tuple[KnownModel, ...] = KNOWN_MODELS,
        validator: ModelSelectionValidator | None = None,
    ) -> None:
        self._settings = settings
        self._catalog = catalog
        self._validator = validator or ModelSelectionValidator()
        self._pending_notice: str | None = None

    def snapshot(self, bundle: BundleHandle) -> ModelSelectionSnapshot:
        options = self.build_options(bundle)
        selected_index = self._determine_selection_index(options)
        return ModelSelectionSnapshot(
            options=options,
            selected_index=selected_index,
            path_description=self._path_description(bundle),
        )

    def resolve_model_path(self, bundle: BundleHandle) -> Path:
        self._pending_notice = None

        filename = self._settings.selected_model_filename
        if filename is None:
            return bundle.default_model

        result = self._validator.validate(filename, bundle.models_directory)
        if result.path is not None:
            return result.path

        detail = result.rejection.detail if result.rejection else 'unknown reason'
        message = (
            f'Stored model "{filename}" was rejected: {detail}. Falling back to {bundle.default_model.name}.'
        )
        self._settings.selected_model_filename = None
        self._pending_notice = message
        log.warning(message)
        return bundle.default_model

    def drain_notice(self) -> str | None:
        """Return the pending rejection notice once; None on every later call."""
        notice, self._pending_notice = self._pending_notice, None
        return notice

    def apply_selection(self, option: ModelOption) -> None:
        self._settings.selected_model_filename = option.filename
        log.info('Model selection set to %s', option.filename or 'bundle default')

    def build_options(self, bundle: BundleHandle) -> list[ModelOption]:
        options: list[ModelOption] = []
        for known in self._catalog:
            options.append(
                ModelOption(
                    kind=OptionKind.KNOWN,
                    display_name=known.display_name,
                    filename=known.filename,
                    available=(bundle.models_directory / known.filename).is_file(),
                    model=known,
                )
            )

        known_names = {known.filename for known in self._catalog}
        for path in _list_model_files(bundle.models_directory):
            if path.name in known_names:
                continue
            options.append(
                ModelOption(
                    kind=OptionKind.LOCAL,
                    display_name=f'{path.stem} (local)',
                    filename=path.name,
                    available=True,
                )
            )
        return options

    def _determine_selection_index(self, options: list[ModelOption]) -> int | None:
        if not options:
            return None

        current = self._settings.selected_model_filename
        if current is not None:
            for idx, option in enumerate(options):
                if option.filename == current:
                    return idx

        for idx, option in enumerate(options):
            if option.kind == OptionKind.KNOWN and option.model is not None and option.model.id == BASE_MODEL_ID:
                self._settings.selected_model_filename = option.filename
                return idx

        for idx, option in enumerate(options):
            if option.filename is not None:
                self._settings.selected_model_filename = option.filename
                return idx

        return None

    def _path_description(self, bundle: BundleHandle) -> str:
        filename = self._settings.selected_model_filename
        return f'Selected model: {filename or bundle.default_model.name}'


def _list_model_files(models_directory: Path) -> list[Path]:
    try:
        entries = sorted(models_directory.iterdir())
    except OSError:
        return []
    return [p for p in entries if p.suffix == MODEL_SUFFIX and p.is_file()]
