"""whisperkey -- verified bundle, model selection and scratch-file core for a whisper.cpp dictation helper."""

__version__ = '0.3.0'
