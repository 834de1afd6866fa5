"""Use case: one push-to-talk capture session. Record, transcribe, then always clean up."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from whisperkey.l1_entities.bundle import BundleHandle
from whisperkey.l1_entities.errors import CleanupError, RecorderError
from whisperkey.l2_use_cases.ports.audio_recorder import AudioRecorder
from whisperkey.l2_use_cases.ports.scratch_file import ScratchFile
from whisperkey.l2_use_cases.ports.transcriber import Transcriber

log = logging.getLogger('wk.session')


@dataclass
class CaptureSessionResult:
    text: str
    cleanup_error: CleanupError | None = None


class CaptureSessionUseCase:
    """Owns the scratch file for exactly one session.

    The scratch file is allocated at the start and destroyed at the end no
    matter how the session ends. A cleanup failure after a successful
    transcription is attached to the result, never raised over it.
    """

    def __init__(
        self,
        recorder: AudioRecorder,
        transcriber: Transcriber,
        scratch_factory: Callable[[], ScratchFile],
        wait: Callable[[float], None] = time.sleep,
    ) -> None:
        self._recorder = recorder
        self._transcriber = transcriber
        self._scratch_factory = scratch_factory
        self._wait = wait

    def execute(self, bundle: BundleHandle, model_path: Path, duration: float) -> CaptureSessionResult:
        scratch = self._scratch_factory()
        text: str | None = None
        try:
            self._record(scratch, duration)
            text = self._transcriber.transcribe(bundle.executable, model_path, scratch.path)
        finally:
            cleanup_error = self._cleanup(scratch, succeeded=text is not None)
        return CaptureSessionResult(text=text.strip(), cleanup_error=cleanup_error)

    def _record(self, scratch: ScratchFile, duration: float) -> None:
        self._recorder.begin_recording(scratch.path)
        try:
            scratch.harden()
        except RecorderError:
            self._recorder.stop_recording()
            raise
        try:
            self._wait(duration)
        finally:
            self._recorder.stop_recording()
        scratch.mark_written()

    @staticmethod
    def _cleanup(scratch: ScratchFile, *, succeeded: bool) -> CleanupError | None:
        try:
            scratch.cleanup()
        except CleanupError as e:
            if succeeded:
                log.error('Transcription succeeded but scratch cleanup failed: %s', e)
            else:
                log.error('Scratch cleanup failed after an aborted session: %s', e)
            return e
        return None
