"""Tests for model option entities."""

from __future__ import annotations

from whisperkey.l1_entities.model_catalog import get_known_model
from whisperkey.l1_entities.model_option import ModelOption, ModelSelectionSnapshot, OptionKind


def _known(available: bool) -> ModelOption:
    model = get_known_model('small')
    return ModelOption(
        kind=OptionKind.KNOWN,
        display_name=model.display_name,
        filename=model.filename,
        available=available,
        model=model,
    )


class TestModelOption:
    def test_menu_title_marks_download(self):
        assert _known(False).menu_title == 'Small (download)'
        assert _known(True).menu_title == 'Small'

    def test_needs_download_only_for_missing_known(self):
        assert _known(False).needs_download is True
        assert _known(True).needs_download is False
        local = ModelOption(kind=OptionKind.LOCAL, display_name='x (local)', filename='x.bin', available=True)
        assert local.needs_download is False

    def test_bundle_default_has_no_filename(self):
        option = ModelOption.bundle_default()
        assert option.kind == OptionKind.BUNDLE_DEFAULT
        assert option.filename is None
        assert option.needs_download is False


class TestSnapshot:
    def test_selected_option(self):
        snap = ModelSelectionSnapshot(options=[_known(True)], selected_index=0, path_description='')
        assert snap.selected_option is not None
        assert snap.selected_option.filename == 'ggml-small.bin'

    def test_out_of_range_index(self):
        snap = ModelSelectionSnapshot(options=[_known(True)], selected_index=3, path_description='')
        assert snap.selected_option is None

    def test_no_selection(self):
        snap = ModelSelectionSnapshot(options=[], selected_index=None, path_description='')
        assert snap.selected_option is None
