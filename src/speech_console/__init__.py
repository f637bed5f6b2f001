"""
Speech console: a command-line harness for Azure Speech recognition samples.

The positional argument grammar is interpreted by ``parse_arguments``; the
chosen sample runs on a lightweight REST client that mimics the official
Azure Speech SDK (SpeechRecognizer, TranslationRecognizer, IntentRecognizer).
"""
from .args import (
    ArgumentError,
    AudioSource,
    AudioSourceKind,
    Credential,
    InvocationRequest,
    Mode,
    ModelSelector,
    OfflineEngine,
    SelectorKind,
    UsageError,
    parse_arguments,
)
from .client import (
    AudioConfig,
    AzureSpeechError,
    IntentRecognitionResult,
    IntentRecognizer,
    ResultReason,
    SpeechRecognitionResult,
    SpeechRecognizer,
    TranslationRecognitionResult,
    TranslationRecognizer,
)
from .config import ConsoleSettings, SpeechConfig

__all__ = [
    "ArgumentError",
    "AudioConfig",
    "AudioSource",
    "AudioSourceKind",
    "AzureSpeechError",
    "ConsoleSettings",
    "Credential",
    "IntentRecognitionResult",
    "IntentRecognizer",
    "InvocationRequest",
    "Mode",
    "ModelSelector",
    "OfflineEngine",
    "ResultReason",
    "SelectorKind",
    "SpeechConfig",
    "SpeechRecognitionResult",
    "SpeechRecognizer",
    "TranslationRecognitionResult",
    "TranslationRecognizer",
    "UsageError",
    "parse_arguments",
]
