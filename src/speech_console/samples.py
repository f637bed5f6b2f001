"""
Recognition samples driven by the console.

One coroutine per combination of recognition kind (speech, intent,
translation) and model selection (base model, customized model, explicit
endpoint, offline engine). Each prints its results and returns them.
"""
from typing import List, Optional

import httpx
import structlog

from .client import (
    AudioConfig,
    IntentRecognitionResult,
    IntentRecognizer,
    SpeechRecognitionResult,
    SpeechRecognizer,
    TranslationRecognitionResult,
    TranslationRecognizer,
)
from .config import ConsoleSettings, SpeechConfig

logger = structlog.get_logger(__name__)


def _auth_config(subscription_key: str, region: Optional[str], use_token: bool, **kwargs) -> SpeechConfig:
    if use_token:
        return SpeechConfig.from_authorization_token(subscription_key, region=region, **kwargs)
    return SpeechConfig.from_subscription(subscription_key, region=region, **kwargs)


def _audio_config(filename: Optional[str], use_stream: bool, device_name: Optional[str]) -> AudioConfig:
    if filename:
        return AudioConfig(filename=filename, stream=use_stream)
    return AudioConfig(use_default_microphone=True, device_name=device_name)


def _print_speech(result: SpeechRecognitionResult) -> None:
    print(f"Recognized: {result.text!r} (reason={result.reason.name}, offset={result.offset}, duration={result.duration})")


def _print_translation(result: TranslationRecognitionResult) -> None:
    print(f"Recognized: {result.recognized!r} (reason={result.reason.name})")
    for language, text in result.translations.items():
        print(f"  {language}: {text}")


def _print_intent(result: IntentRecognitionResult) -> None:
    print(f"Recognized: {result.text!r} intent={result.intent_id} score={result.score} (reason={result.reason.name})")


async def _run_speech(
    speech_config: SpeechConfig,
    audio_config: AudioConfig,
    *,
    use_continuous_recognition: bool,
    settings: Optional[ConsoleSettings],
    async_transport: Optional[httpx.AsyncBaseTransport],
) -> List[SpeechRecognitionResult]:
    settings = settings or ConsoleSettings.from_env()
    async with SpeechRecognizer(
        speech_config,
        audio_config,
        timeout=settings.timeout,
        record_seconds=settings.record_seconds,
        async_transport=async_transport,
    ) as recognizer:
        if use_continuous_recognition:
            results = await recognizer.recognize_continuous_async(segment_seconds=settings.segment_seconds)
        else:
            results = [await recognizer.recognize_once_async()]
    for result in results:
        _print_speech(result)
    logger.info("recognition_completed", kind="speech", results=len(results))
    return results


async def speech_recognition_base_model_async(
    subscription_key: str,
    *,
    region: str,
    lang: Optional[str] = None,
    filename: Optional[str] = None,
    use_stream: bool = False,
    use_token: bool = False,
    use_continuous_recognition: bool = False,
    device_name: Optional[str] = None,
    settings: Optional[ConsoleSettings] = None,
    async_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> List[SpeechRecognitionResult]:
    """Recognize speech with the service's default model for ``lang``."""
    speech_config = _auth_config(subscription_key, region, use_token, speech_recognition_language=lang)
    return await _run_speech(
        speech_config,
        _audio_config(filename, use_stream, device_name),
        use_continuous_recognition=use_continuous_recognition,
        settings=settings,
        async_transport=async_transport,
    )


async def speech_recognition_customized_model_async(
    subscription_key: str,
    region: str,
    model_id: str,
    filename: Optional[str] = None,
    *,
    use_stream: bool = False,
    use_token: bool = False,
    use_continuous_recognition: bool = False,
    device_name: Optional[str] = None,
    settings: Optional[ConsoleSettings] = None,
    async_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> List[SpeechRecognitionResult]:
    """Recognize speech with a customized model deployment."""
    speech_config = _auth_config(subscription_key, region, use_token, endpoint_id=model_id)
    return await _run_speech(
        speech_config,
        _audio_config(filename, use_stream, device_name),
        use_continuous_recognition=use_continuous_recognition,
        settings=settings,
        async_transport=async_transport,
    )


async def speech_recognition_by_endpoint_async(
    subscription_key: str,
    endpoint: str,
    *,
    lang: Optional[str] = None,
    model: Optional[str] = None,
    filename: Optional[str] = None,
    use_stream: bool = False,
    use_continuous_recognition: bool = False,
    device_name: Optional[str] = None,
    settings: Optional[ConsoleSettings] = None,
    async_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> List[SpeechRecognitionResult]:
    """Recognize speech against an explicit endpoint URL."""
    speech_config = SpeechConfig.from_endpoint(
        endpoint, subscription_key, speech_recognition_language=lang, endpoint_id=model
    )
    return await _run_speech(
        speech_config,
        _audio_config(filename, use_stream, device_name),
        use_continuous_recognition=use_continuous_recognition,
        settings=settings,
        async_transport=async_transport,
    )


async def _speech_recognition_offline_async(
    host: str,
    subscription_key: str,
    *,
    region: str,
    lang: Optional[str],
    filename: Optional[str],
    use_stream: bool,
    use_token: bool,
    use_continuous_recognition: bool,
    device_name: Optional[str],
    settings: ConsoleSettings,
    async_transport: Optional[httpx.AsyncBaseTransport],
) -> List[SpeechRecognitionResult]:
    logger.info("offline_engine_selected", host=host)
    speech_config = _auth_config(subscription_key, region, use_token, host=host, speech_recognition_language=lang)
    return await _run_speech(
        speech_config,
        _audio_config(filename, use_stream, device_name),
        use_continuous_recognition=use_continuous_recognition,
        settings=settings,
        async_transport=async_transport,
    )


async def speech_recognition_offline_unidec_async(
    subscription_key: str,
    *,
    region: str,
    lang: Optional[str] = None,
    filename: Optional[str] = None,
    use_stream: bool = False,
    use_token: bool = False,
    use_continuous_recognition: bool = False,
    device_name: Optional[str] = None,
    settings: Optional[ConsoleSettings] = None,
    async_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> List[SpeechRecognitionResult]:
    """Recognize speech with the on-device Unidec decoder."""
    settings = settings or ConsoleSettings.from_env()
    return await _speech_recognition_offline_async(
        settings.unidec_host,
        subscription_key,
        region=region,
        lang=lang,
        filename=filename,
        use_stream=use_stream,
        use_token=use_token,
        use_continuous_recognition=use_continuous_recognition,
        device_name=device_name,
        settings=settings,
        async_transport=async_transport,
    )


async def speech_recognition_offline_rnnt_async(
    subscription_key: str,
    *,
    region: str,
    lang: Optional[str] = None,
    filename: Optional[str] = None,
    use_stream: bool = False,
    use_token: bool = False,
    use_continuous_recognition: bool = False,
    device_name: Optional[str] = None,
    settings: Optional[ConsoleSettings] = None,
    async_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> List[SpeechRecognitionResult]:
    """Recognize speech with the on-device RNN-T decoder."""
    settings = settings or ConsoleSettings.from_env()
    return await _speech_recognition_offline_async(
        settings.rnnt_host,
        subscription_key,
        region=region,
        lang=lang,
        filename=filename,
        use_stream=use_stream,
        use_token=use_token,
        use_continuous_recognition=use_continuous_recognition,
        device_name=device_name,
        settings=settings,
        async_transport=async_transport,
    )


async def _run_intent(
    speech_config: SpeechConfig,
    audio_config: AudioConfig,
    *,
    use_continuous_recognition: bool,
    settings: Optional[ConsoleSettings],
    async_transport: Optional[httpx.AsyncBaseTransport],
) -> List[IntentRecognitionResult]:
    settings = settings or ConsoleSettings.from_env()
    async with IntentRecognizer(
        speech_config,
        audio_config,
        app_id=settings.intent_app_id,
        timeout=settings.timeout,
        record_seconds=settings.record_seconds,
        async_transport=async_transport,
    ) as recognizer:
        if use_continuous_recognition:
            results = await recognizer.recognize_continuous_async(segment_seconds=settings.segment_seconds)
        else:
            results = [await recognizer.recognize_once_async()]
    for result in results:
        _print_intent(result)
    logger.info("recognition_completed", kind="intent", results=len(results))
    return results


async def intent_recognition_base_model_async(
    subscription_key: str,
    region: str,
    filename: Optional[str] = None,
    *,
    use_continuous_recognition: bool = False,
    device_name: Optional[str] = None,
    settings: Optional[ConsoleSettings] = None,
    async_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> List[IntentRecognitionResult]:
    """Recognize intents using the base speech model."""
    return await _run_intent(
        SpeechConfig.from_subscription(subscription_key, region=region),
        _audio_config(filename, False, device_name),
        use_continuous_recognition=use_continuous_recognition,
        settings=settings,
        async_transport=async_transport,
    )


async def intent_recognition_by_endpoint_async(
    subscription_key: str,
    endpoint: str,
    filename: Optional[str] = None,
    *,
    region: Optional[str] = None,
    use_continuous_recognition: bool = False,
    device_name: Optional[str] = None,
    settings: Optional[ConsoleSettings] = None,
    async_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> List[IntentRecognitionResult]:
    """Recognize intents with speech recognized at an explicit endpoint URL."""
    return await _run_intent(
        SpeechConfig.from_endpoint(endpoint, subscription_key, region=region),
        _audio_config(filename, False, device_name),
        use_continuous_recognition=use_continuous_recognition,
        settings=settings,
        async_transport=async_transport,
    )


async def _run_translation(
    speech_config: SpeechConfig,
    audio_config: AudioConfig,
    *,
    use_continuous_recognition: bool,
    settings: Optional[ConsoleSettings],
    async_transport: Optional[httpx.AsyncBaseTransport],
) -> List[TranslationRecognitionResult]:
    settings = settings or ConsoleSettings.from_env()
    async with TranslationRecognizer(
        speech_config,
        audio_config,
        target_languages=settings.translation_targets,
        timeout=settings.timeout,
        record_seconds=settings.record_seconds,
        async_transport=async_transport,
    ) as recognizer:
        if use_continuous_recognition:
            results = await recognizer.recognize_continuous_async(segment_seconds=settings.segment_seconds)
        else:
            results = [await recognizer.recognize_once_async()]
    for result in results:
        _print_translation(result)
    logger.info("recognition_completed", kind="translation", results=len(results))
    return results


async def translation_base_model_async(
    subscription_key: str,
    *,
    region: str,
    filename: Optional[str] = None,
    use_stream: bool = False,
    use_continuous_recognition: bool = False,
    device_name: Optional[str] = None,
    settings: Optional[ConsoleSettings] = None,
    async_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> List[TranslationRecognitionResult]:
    """Translate speech using the base speech model."""
    return await _run_translation(
        SpeechConfig.from_subscription(subscription_key, region=region),
        _audio_config(filename, use_stream, device_name),
        use_continuous_recognition=use_continuous_recognition,
        settings=settings,
        async_transport=async_transport,
    )


async def translation_customized_model_async(
    subscription_key: str,
    *,
    region: str,
    model_id: str,
    filename: Optional[str] = None,
    use_stream: bool = False,
    use_continuous_recognition: bool = False,
    device_name: Optional[str] = None,
    settings: Optional[ConsoleSettings] = None,
    async_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> List[TranslationRecognitionResult]:
    """Translate speech recognized by a customized model deployment."""
    return await _run_translation(
        SpeechConfig.from_subscription(subscription_key, region=region, endpoint_id=model_id),
        _audio_config(filename, use_stream, device_name),
        use_continuous_recognition=use_continuous_recognition,
        settings=settings,
        async_transport=async_transport,
    )


async def translation_by_endpoint_async(
    subscription_key: str,
    endpoint: str,
    filename: Optional[str] = None,
    *,
    use_stream: bool = False,
    use_continuous_recognition: bool = False,
    device_name: Optional[str] = None,
    settings: Optional[ConsoleSettings] = None,
    async_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> List[TranslationRecognitionResult]:
    """Translate speech against an explicit endpoint URL."""
    return await _run_translation(
        SpeechConfig.from_endpoint(endpoint, subscription_key),
        _audio_config(filename, use_stream, device_name),
        use_continuous_recognition=use_continuous_recognition,
        settings=settings,
        async_transport=async_transport,
    )
