"""
Soak test that repeatedly creates, uses and closes recognizers while
tracking Python heap growth with tracemalloc.
"""
import gc
import tracemalloc
from dataclasses import dataclass
from typing import Optional

import httpx
import structlog

from .client import AudioConfig, SpeechRecognizer
from .config import ConsoleSettings, SpeechConfig

logger = structlog.get_logger(__name__)


@dataclass
class LeakReport:
    kind: str
    iterations: int
    baseline_bytes: int
    final_bytes: int
    threshold_bytes: int

    @property
    def growth_bytes(self) -> int:
        return self.final_bytes - self.baseline_bytes

    @property
    def leaked(self) -> bool:
        return self.growth_bytes > self.threshold_bytes


async def memory_leak_test_async(
    subscription_key: str,
    region: str,
    filename: Optional[str],
    kind: Optional[str],
    *,
    use_token: bool = False,
    settings: Optional[ConsoleSettings] = None,
    async_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> LeakReport:
    """Run the recognizer lifecycle ``settings.memleak_iterations`` times.

    Args:
        subscription_key: Subscription key or authorization token
        region: Azure region
        filename: Audio file, microphone when None
        kind: ``"cont"`` for continuous recognition, anything else single-shot
        use_token: Treat ``subscription_key`` as an authorization token

    Returns:
        LeakReport comparing traced memory after the warm-up iteration with
        traced memory after the last one.
    """
    settings = settings or ConsoleSettings.from_env()
    kind = kind or "single"
    continuous = kind.lower() == "cont"
    if use_token:
        speech_config = SpeechConfig.from_authorization_token(subscription_key, region=region)
    else:
        speech_config = SpeechConfig.from_subscription(subscription_key, region=region)
    audio_config = AudioConfig(filename=filename) if filename else AudioConfig(use_default_microphone=True)
    # Read once so repeated microphone captures don't dominate the run.
    audio_data: Optional[bytes] = None

    iterations = max(1, settings.memleak_iterations)
    baseline = 0
    started = not tracemalloc.is_tracing()
    if started:
        tracemalloc.start()
    try:
        for iteration in range(iterations):
            async with SpeechRecognizer(
                speech_config,
                audio_config,
                timeout=settings.timeout,
                record_seconds=settings.record_seconds,
                async_transport=async_transport,
            ) as recognizer:
                if audio_data is None:
                    audio_data = recognizer.read_audio()
                if continuous:
                    await recognizer.recognize_continuous_async(audio_data, segment_seconds=settings.segment_seconds)
                else:
                    await recognizer.recognize_once_async(audio_data)
            gc.collect()
            current, _ = tracemalloc.get_traced_memory()
            if iteration == 0:
                baseline = current
            logger.debug("memleak_iteration", iteration=iteration, traced_bytes=current)
        final, _ = tracemalloc.get_traced_memory()
    finally:
        if started:
            tracemalloc.stop()

    report = LeakReport(
        kind=kind,
        iterations=iterations,
        baseline_bytes=baseline,
        final_bytes=final,
        threshold_bytes=settings.memleak_threshold_kb * 1024,
    )
    print(f"Memory leak test ({kind}): {iterations} iterations, growth {report.growth_bytes} bytes")
    if report.leaked:
        logger.warning("memleak_threshold_exceeded", growth_bytes=report.growth_bytes, threshold_bytes=report.threshold_bytes)
    else:
        logger.info("memleak_completed", growth_bytes=report.growth_bytes)
    return report
