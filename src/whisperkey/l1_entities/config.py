"""Configuration schema for whisperkey: bundle layout, verification and scratch files."""

from __future__ import annotations

from pydantic import BaseModel


class BundleConfig(BaseModel):
    root: str
    subpath: str
    executable: str
    models_dir: str
    default_model: str
    manifest: str


class VerificationConfig(BaseModel):
    hash_chunk_size: int
    parallel: bool


class ScratchConfig(BaseModel):
    prefix: str
    extension: str
    secure_overwrite: bool
    erase_chunk_size: int
    base_dir: str | None = None  # None = system temp dir


class AppConfig(BaseModel):
    bundle: BundleConfig
    verification: VerificationConfig
    scratch: ScratchConfig
