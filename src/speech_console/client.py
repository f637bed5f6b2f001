from dataclasses import dataclass, field
from enum import Enum
from typing import Any, AsyncIterable, Dict, Iterable, List, Optional, Union

import httpx
import structlog

from . import audio
from .config import SpeechConfig

logger = structlog.get_logger(__name__)


class ResultReason(Enum):
    """Result reason enum to mimic the official Azure Speech SDK."""
    NoMatch = 0
    Canceled = 1
    RecognizingSpeech = 2
    RecognizedSpeech = 3
    RecognizingIntent = 4
    RecognizedIntent = 5
    TranslatingSpeech = 6
    TranslatedSpeech = 7


_STATUS_REASONS = {
    "Success": ResultReason.RecognizedSpeech,
    "NoMatch": ResultReason.NoMatch,
    "InitialSilenceTimeout": ResultReason.NoMatch,
    "BabbleTimeout": ResultReason.NoMatch,
    "Error": ResultReason.Canceled,
}


def reason_from_status(status: Optional[str]) -> ResultReason:
    """Map the service's RecognitionStatus to a ResultReason."""
    if status is None:
        return ResultReason.RecognizedSpeech
    return _STATUS_REASONS.get(status, ResultReason.Canceled)


class AudioConfig:
    """Audio configuration to mimic the official Azure Speech SDK.

    Either a file (optionally uploaded as a chunked stream) or the
    microphone, optionally a specific capture device.
    """

    def __init__(
        self,
        *,
        use_default_microphone: bool = False,
        filename: Optional[str] = None,
        device_name: Optional[str] = None,
        stream: bool = False,
    ):
        """Initialize AudioConfig.

        Args:
            use_default_microphone: Whether to capture from the default microphone
            filename: Audio file path
            device_name: Capture device name or index (microphone only)
            stream: Upload the file with chunked transfer encoding
        """
        if filename and device_name:
            raise ValueError("cannot specify device name when recognizing from file.")
        self.use_default_microphone = use_default_microphone
        self.filename = filename
        self.device_name = device_name
        self.stream = stream

    @property
    def is_microphone(self) -> bool:
        return not self.filename


class AzureSpeechError(Exception):
    """Raised when Azure Speech REST API returns an error response."""

    def __init__(self, message: str, status_code: Optional[int] = None, details: Optional[dict] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details or {}


@dataclass
class SpeechRecognitionResult:
    text: str
    duration: Optional[int]
    offset: Optional[int]
    raw: Dict
    reason: ResultReason = ResultReason.RecognizedSpeech


@dataclass
class TranslationRecognitionResult:
    translations: Dict[str, str]
    recognized: Optional[str]
    raw: Dict
    reason: ResultReason = ResultReason.TranslatedSpeech


@dataclass
class IntentRecognitionResult:
    text: str
    intent_id: Optional[str]
    score: Optional[float]
    entities: Dict[str, Any] = field(default_factory=dict)
    raw: Dict = field(default_factory=dict)
    reason: ResultReason = ResultReason.RecognizedIntent


class _Recognizer:
    """Shared plumbing: HTTP client lifecycle, auth headers, audio upload."""

    def __init__(
        self,
        speech_config: SpeechConfig,
        audio_config: Optional[AudioConfig] = None,
        *,
        timeout: float = 15.0,
        record_seconds: float = 5.0,
        async_transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize the recognizer.

        Args:
            speech_config: Configuration for speech service
            audio_config: Audio input, default microphone when omitted
            timeout: HTTP request timeout in seconds
            record_seconds: Length of a microphone capture
            async_transport: Custom HTTP transport for async requests
        """
        speech_config.validate()
        self.speech_config = speech_config
        self.audio_config = audio_config or AudioConfig(use_default_microphone=True)
        self.record_seconds = record_seconds
        self._async_client = httpx.AsyncClient(timeout=timeout, transport=async_transport)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the async client."""
        if not self._async_client.is_closed:
            await self._async_client.aclose()

    def read_audio(self) -> bytes:
        return audio.load_audio(
            self.audio_config.filename,
            device_name=self.audio_config.device_name,
            record_seconds=self.record_seconds,
        )

    async def _post_audio(
        self,
        url: str,
        audio_data: bytes,
        *,
        params: Dict[str, Any],
        content_type: str = "audio/wav",
    ) -> Dict:
        headers = self._auth_headers()
        headers["Content-Type"] = content_type
        content: Union[bytes, AsyncIterable[bytes]] = audio_data
        if self.audio_config.stream:
            content = audio.iter_chunks(audio_data)
        response = await self._async_client.post(url, params=params, headers=headers, content=content)
        self._raise_for_status(response)
        return response.json()

    def _auth_headers(self) -> Dict[str, str]:
        headers: Dict[str, str] = {}
        if self.speech_config.authorization_token:
            headers["Authorization"] = f"Bearer {self.speech_config.authorization_token}"
        elif self.speech_config.subscription_key:
            headers["Ocp-Apim-Subscription-Key"] = self.speech_config.subscription_key
        return headers

    def _raise_for_status(self, response: httpx.Response) -> None:
        if response.is_success:
            return
        message = response.text
        details: Dict = {}
        try:
            payload = response.json()
            details = payload
            message = (
                payload.get("error", {}).get("message")
                or payload.get("message")
                or payload.get("statusText")
                or message
            )
        except ValueError:
            pass
        raise AzureSpeechError(message=message, status_code=response.status_code, details=details)


class SpeechRecognizer(_Recognizer):
    """Speech recognizer to mimic the official Azure Speech SDK.

    Converts speech to text. Uses the REST API internally.
    """

    async def recognize_once_async(
        self,
        audio_data: Optional[bytes] = None,
        *,
        format: str = "simple",
        content_type: str = "audio/wav",
    ) -> SpeechRecognitionResult:
        """Recognize a single utterance.

        Args:
            audio_data: Audio bytes, read from the audio config when omitted
            format: Response format (simple or detailed)
            content_type: Audio content type

        Returns:
            SpeechRecognitionResult with recognized text
        """
        if audio_data is None:
            audio_data = self.read_audio()
        data = await self._post_audio(
            self.speech_config.stt_url,
            audio_data,
            params=self.speech_config.recognition_params(format),
            content_type=content_type,
        )
        return SpeechRecognitionResult(
            text=data.get("DisplayText") or data.get("Text") or "",
            duration=data.get("Duration"),
            offset=data.get("Offset"),
            raw=data,
            reason=reason_from_status(data.get("RecognitionStatus")),
        )

    async def recognize_continuous_async(
        self,
        audio_data: Optional[bytes] = None,
        *,
        segment_seconds: float = 15.0,
    ) -> List[SpeechRecognitionResult]:
        """Recognize the whole input, one request per ``segment_seconds`` of audio."""
        if audio_data is None:
            audio_data = self.read_audio()
        results = []
        for index, segment in enumerate(audio.split_wav(audio_data, segment_seconds)):
            result = await self.recognize_once_async(segment)
            logger.debug("segment_recognized", segment=index, reason=result.reason.name)
            results.append(result)
        return results


class TranslationRecognizer(_Recognizer):
    """Translation recognizer to mimic the official Azure Speech SDK."""

    def __init__(
        self,
        speech_config: SpeechConfig,
        audio_config: Optional[AudioConfig] = None,
        *,
        target_languages: Iterable[str],
        **kwargs,
    ) -> None:
        targets = list(target_languages)
        if not targets:
            raise ValueError("At least one target language code must be provided.")
        super().__init__(speech_config, audio_config, **kwargs)
        self.target_languages = targets

    async def recognize_once_async(
        self,
        audio_data: Optional[bytes] = None,
        *,
        content_type: str = "audio/wav",
    ) -> TranslationRecognitionResult:
        """Translate a single utterance into the target languages."""
        if audio_data is None:
            audio_data = self.read_audio()
        params: Dict[str, Any] = self.speech_config.recognition_params()
        params["to"] = self.target_languages
        if "language" in params:
            params["from"] = params.pop("language")
        data = await self._post_audio(
            self.speech_config.translation_url, audio_data, params=params, content_type=content_type
        )
        translations: Dict[str, str] = {}
        for item in data.get("translations", []):
            if not isinstance(item, dict):
                continue
            language_code = item.get("to")
            if language_code:
                translations[language_code] = item.get("text", "")
        recognized = data.get("text") or data.get("DisplayText")
        reason = ResultReason.TranslatedSpeech if translations else ResultReason.NoMatch
        return TranslationRecognitionResult(translations=translations, recognized=recognized, raw=data, reason=reason)

    async def recognize_continuous_async(
        self,
        audio_data: Optional[bytes] = None,
        *,
        segment_seconds: float = 15.0,
    ) -> List[TranslationRecognitionResult]:
        if audio_data is None:
            audio_data = self.read_audio()
        return [
            await self.recognize_once_async(segment)
            for segment in audio.split_wav(audio_data, segment_seconds)
        ]


class IntentRecognizer(_Recognizer):
    """Intent recognizer: speech recognition followed by a LUIS prediction."""

    def __init__(
        self,
        speech_config: SpeechConfig,
        audio_config: Optional[AudioConfig] = None,
        *,
        app_id: Optional[str],
        **kwargs,
    ) -> None:
        if not app_id:
            raise ValueError("An intent app id must be provided.")
        super().__init__(speech_config, audio_config, **kwargs)
        self.app_id = app_id

    async def recognize_once_async(self, audio_data: Optional[bytes] = None) -> IntentRecognitionResult:
        """Recognize one utterance and resolve its intent."""
        if audio_data is None:
            audio_data = self.read_audio()
        data = await self._post_audio(
            self.speech_config.stt_url, audio_data, params=self.speech_config.recognition_params()
        )
        text = data.get("DisplayText") or data.get("Text") or ""
        reason = reason_from_status(data.get("RecognitionStatus"))
        if reason is not ResultReason.RecognizedSpeech or not text:
            return IntentRecognitionResult(text=text, intent_id=None, score=None, raw=data, reason=reason)
        return await self._predict(text)

    async def recognize_continuous_async(
        self,
        audio_data: Optional[bytes] = None,
        *,
        segment_seconds: float = 15.0,
    ) -> List[IntentRecognitionResult]:
        if audio_data is None:
            audio_data = self.read_audio()
        return [
            await self.recognize_once_async(segment)
            for segment in audio.split_wav(audio_data, segment_seconds)
        ]

    async def _predict(self, text: str) -> IntentRecognitionResult:
        response = await self._async_client.get(
            self.speech_config.intent_url(self.app_id),
            params={"query": text},
            headers=self._auth_headers(),
        )
        self._raise_for_status(response)
        data = response.json()
        prediction = data.get("prediction") or {}
        intent_id = prediction.get("topIntent")
        score = (prediction.get("intents") or {}).get(intent_id, {}).get("score") if intent_id else None
        return IntentRecognitionResult(
            text=text,
            intent_id=intent_id,
            score=score,
            entities=prediction.get("entities") or {},
            raw=data,
            reason=ResultReason.RecognizedIntent if intent_id else ResultReason.RecognizedSpeech,
        )
