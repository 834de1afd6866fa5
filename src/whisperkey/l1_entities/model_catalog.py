"""Known whisper.cpp ggml models -- static reference data built once at import."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

WHISPER_CPP_DOWNLOAD_BASE = 'https://huggingface.co/ggerganov/whisper.cpp/resolve/main'
BASE_MODEL_ID = 'base'


class KnownModel(BaseModel):
    """One catalog entry. ``sha256`` is required; ``expected_bytes`` is optional."""

    model_config = ConfigDict(frozen=True)

    id: str
    display_name: str
    filename: str
    expected_bytes: int | None = None
    sha256: str
    download_url: str


def _entry(model_id: str, display_name: str, expected_bytes: int | None, sha256: str) -> KnownModel:
    filename = f'ggml-{model_id}.bin'
    return KnownModel(
        id=model_id,
        display_name=display_name,
        filename=filename,
        expected_bytes=expected_bytes,
        sha256=sha256,
        download_url=f'{WHISPER_CPP_DOWNLOAD_BASE}/{filename}?download=1',
    )


# fmt: off
KNOWN_MODELS: tuple[KnownModel, ...] = (
    _entry('tiny', 'Tiny', 77_691_713, 'be07e048e1e599ad46341c8d2a135645097a538221678b7acdd1b1919c6e1b21'),
    _entry('tiny.en', 'Tiny (English)', 77_704_715, '921e4cf8686fdd993dcd081a5da5b6c365bfde1162e72b08d75ac75289920b1f'),
    _entry('base', 'Base', 147_951_465, '60ed5bc3dd14eea856493d334349b405782ddcaf0028d4b5df4088345fba2efe'),
    _entry('base.en', 'Base (English)', 147_964_211, 'a03779c86df3323075f5e796cb2ce5029f00ec8869eee3fdfb897afe36c6d002'),
    _entry('small', 'Small', 487_601_967, '1be3a9b2063867b937e64e2ec7483364a79917e157fa98c5d94b5c1fffea987b'),
    _entry('small.en', 'Small (English)', 487_614_201, 'c6138d6d58ecc8322097e0f987c32f1be8bb0a18532a3f88f734d1bbf9c41e5d'),
    _entry('medium', 'Medium', 1_533_763_059, '6c14d5adee5f86394037b4e4e8b59f1673b6cee10e3cf0b11bbdbee79c156208'),
    _entry('medium.en', 'Medium (English)', 1_533_774_781, 'cc37e93478338ec7700281a7ac30a10128929eb8f427dda2e865faa8f6da4356'),
    _entry('large-v1', 'Large v1', 3_094_623_691, '7d99f41a10525d0206bddadd86760181fa920438b6b33237e3118ff6c83bb53d'),
    _entry('large-v2', 'Large v2', 3_094_623_691, '9a423fe4d40c82774b6af34115b8b935f34152246eb19e80e376071d3f999487'),
    _entry('large-v3', 'Large v3', 3_095_033_483, '64d182b440b98d5203c4f9bd541544d84c605196c4f7b845dfa11fb23594d1e2'),
)
# fmt: on


def get_known_model(model_id: str, catalog: tuple[KnownModel, ...] = KNOWN_MODELS) -> KnownModel | None:
    for model in catalog:
        if model.id == model_id:
            return model
    return None
