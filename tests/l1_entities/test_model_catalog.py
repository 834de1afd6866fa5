"""Tests for the known-model catalog."""

from __future__ import annotations

import re

from whisperkey.l1_entities.model_catalog import BASE_MODEL_ID, KNOWN_MODELS, get_known_model


class TestKnownModels:
    def test_ids_are_unique(self):
        ids = [m.id for m in KNOWN_MODELS]
        assert len(ids) == len(set(ids))

    def test_every_entry_has_sha256(self):
        for model in KNOWN_MODELS:
            assert re.fullmatch(r'[0-9a-f]{64}', model.sha256), model.id

    def test_filename_follows_ggml_convention(self):
        for model in KNOWN_MODELS:
            assert model.filename == f'ggml-{model.id}.bin'
            assert '/' not in model.filename

    def test_download_url_points_at_filename(self):
        base = get_known_model('base')
        assert base is not None
        assert base.download_url.endswith('/ggml-base.bin?download=1')
        assert base.download_url.startswith('https://huggingface.co/ggerganov/whisper.cpp/')

    def test_base_is_in_catalog(self):
        assert get_known_model(BASE_MODEL_ID) is not None

    def test_base_expected_size(self):
        assert get_known_model('base').expected_bytes == 147_951_465

    def test_unknown_id(self):
        assert get_known_model('huge-v9') is None

    def test_catalog_is_a_tuple(self):
        assert isinstance(KNOWN_MODELS, tuple)
