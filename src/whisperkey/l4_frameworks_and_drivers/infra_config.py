"""Built-in config defaults for the bundle layout and scratch policy, merged under user YAML."""

from __future__ import annotations

import copy

from whisperkey.l1_entities.config import AppConfig
from whisperkey.l3_interface_adapters.gateways.yaml_config_loader import deep_merge

APP_CONFIG_DEFAULTS: dict = {
    'bundle': {
        'root': '.',
        'subpath': 'dist/whisper-bundle',
        'executable': 'bin/whisper-cli',
        'models_dir': 'models',
        'default_model': 'ggml-base.bin',
        'manifest': 'manifest.json',
    },
    'verification': {
        'hash_chunk_size': 256 * 1024,
        'parallel': False,
    },
    'scratch': {
        'prefix': 'recording',
        'extension': 'wav',
        'secure_overwrite': True,
        'erase_chunk_size': 64 * 1024,
        'base_dir': None,
    },
}


def build_app_config(raw: dict) -> AppConfig:
    """Merge *raw* user overrides on top of defaults, then validate."""
    merged = copy.deepcopy(APP_CONFIG_DEFAULTS)
    deep_merge(merged, raw)
    return AppConfig.model_validate(merged)
