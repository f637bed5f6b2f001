"""
Positional argument grammar of the speech console.

``parse_arguments`` turns the raw argument list into an ``InvocationRequest``
or raises an ``ArgumentError`` describing the first offending token. It has
no knowledge of the sample routines or the speech client.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

USAGE = (
    "Usage: speech-console mode(speech|intent|translation|memleak:cont|single) "
    "key(key|token:key) region audioinput(mic|filename|stream:file) "
    "model:modelId|lang:language|endpoint:url|devicename:id [unidec|rnnt]"
)

ALLOWED_SELECTORS = "lang:language, model:modelId, endpoint:url, devicename:id"


class ArgumentError(ValueError):
    """Raised when the argument list violates the console grammar."""


class UsageError(ArgumentError):
    """Too few arguments; carries the usage text."""

    def __init__(self, message: str = USAGE) -> None:
        super().__init__(message)


class UnsupportedModeError(ArgumentError):
    def __init__(self, mode: str, token: str) -> None:
        super().__init__(f"The specified mode is not supported: {token}")
        self.mode = mode
        self.token = token


class MissingValueError(ArgumentError):
    pass


class UnsupportedCombinationError(ArgumentError):
    pass


class InvalidSelectorError(ArgumentError):
    def __init__(self, token: str) -> None:
        super().__init__(f"Only the following values are allowed: {ALLOWED_SELECTORS}. Got: {token}")
        self.token = token


class Mode(Enum):
    SPEECH = "speech"
    INTENT = "intent"
    TRANSLATION = "translation"
    MEMLEAK = "memleak"


class AudioSourceKind(Enum):
    MICROPHONE = "mic"
    FILE = "file"
    STREAM = "stream"


class SelectorKind(Enum):
    NONE = "none"
    LANGUAGE = "lang"
    MODEL_ID = "model"
    ENDPOINT = "endpoint"
    DEVICE_NAME = "devicename"


class OfflineEngine(Enum):
    UNIDEC = "unidec"
    RNNT = "rnnt"


@dataclass(frozen=True)
class Credential:
    value: str
    is_token: bool = False


@dataclass(frozen=True)
class AudioSource:
    kind: AudioSourceKind = AudioSourceKind.MICROPHONE
    path: Optional[str] = None

    @property
    def filename(self) -> Optional[str]:
        return self.path if self.kind is not AudioSourceKind.MICROPHONE else None

    @property
    def is_stream(self) -> bool:
        return self.kind is AudioSourceKind.STREAM


@dataclass(frozen=True)
class ModelSelector:
    kind: SelectorKind = SelectorKind.NONE
    value: Optional[str] = None

    def get(self, kind: SelectorKind) -> Optional[str]:
        return self.value if self.kind is kind else None


@dataclass(frozen=True)
class InvocationRequest:
    mode: Mode
    credential: Credential
    region: str
    audio_source: AudioSource = AudioSource()
    selector: ModelSelector = ModelSelector()
    offline_engine: Optional[OfflineEngine] = None
    continuous: Optional[bool] = None

    @property
    def use_continuous_recognition(self) -> bool:
        return bool(self.continuous)


def _split_prefixed(token: str, prefix: str) -> Optional[str]:
    """Return the value after ``prefix:`` (case-insensitive), or None when the prefix doesn't match."""
    head = prefix + ":"
    if token.lower().startswith(head):
        return token[len(head):]
    return None


def _parse_mode(token: str):
    mode_str, sep, submode = token.partition(":")
    try:
        mode = Mode(mode_str.lower())
    except ValueError:
        raise UnsupportedModeError(mode_str, token) from None
    if not sep:
        return mode, None
    if submode.lower() == "cont":
        return mode, True
    if submode.lower() == "single":
        return mode, False
    raise ArgumentError(f"only cont or single is supported: {token}")


def _parse_credential(token: str) -> Credential:
    token_value = _split_prefixed(token, "token")
    credential = Credential(token, False) if token_value is None else Credential(token_value, True)
    if not credential.value:
        raise MissingValueError("no key is specified.")
    return credential


def _parse_audio_source(token: str) -> AudioSource:
    if not token or token.lower() == "mic":
        return AudioSource(AudioSourceKind.MICROPHONE)
    path = _split_prefixed(token, "stream")
    if path is not None:
        if not path:
            raise MissingValueError("No file name specified as stream input.")
        return AudioSource(AudioSourceKind.STREAM, path)
    return AudioSource(AudioSourceKind.FILE, token)


def _parse_selector(token: str, credential: Credential, audio_source: AudioSource) -> ModelSelector:
    for kind in (SelectorKind.LANGUAGE, SelectorKind.MODEL_ID, SelectorKind.ENDPOINT, SelectorKind.DEVICE_NAME):
        value = _split_prefixed(token, kind.value)
        if value is None:
            continue
        if kind is SelectorKind.ENDPOINT and credential.is_token:
            raise UnsupportedCombinationError(
                "Recognition with endpoint is not supported with authorization token."
            )
        if kind is SelectorKind.DEVICE_NAME and audio_source.kind is not AudioSourceKind.MICROPHONE:
            raise UnsupportedCombinationError("cannot specify device name when recognizing from file.")
        if not value:
            raise MissingValueError(f"no {kind.value} is specified.")
        return ModelSelector(kind, value)
    raise InvalidSelectorError(token)


def _parse_offline_engine(token: str) -> Optional[OfflineEngine]:
    # Unknown engine names fall back to online recognition.
    try:
        return OfflineEngine(token.lower())
    except ValueError:
        return None


def parse_arguments(argv: Sequence[str]) -> InvocationRequest:
    """Interpret the console's positional arguments.

    Args:
        argv: Arguments without the program name.

    Returns:
        A validated InvocationRequest.

    Raises:
        UsageError: Fewer than three arguments.
        ArgumentError: The first malformed, missing or incompatible token.
    """
    if len(argv) < 3:
        raise UsageError()

    mode, continuous = _parse_mode(argv[0])
    credential = _parse_credential(argv[1])
    if credential.is_token and mode in (Mode.INTENT, Mode.TRANSLATION):
        raise UnsupportedCombinationError(
            f"The specified mode is not supported with authorization token: {argv[0]}"
        )

    region = argv[2]
    if not region:
        raise MissingValueError("region may not be empty")

    audio_source = _parse_audio_source(argv[3]) if len(argv) > 3 else AudioSource()
    selector = _parse_selector(argv[4], credential, audio_source) if len(argv) > 4 else ModelSelector()
    offline_engine = _parse_offline_engine(argv[5]) if len(argv) > 5 else None

    return InvocationRequest(
        mode=mode,
        credential=credential,
        region=region,
        audio_source=audio_source,
        selector=selector,
        offline_engine=offline_engine,
        continuous=continuous,
    )
