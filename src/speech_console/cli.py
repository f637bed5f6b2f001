"""
Console entry point: interpret the arguments, pick one sample and run it.
"""
import argparse
import asyncio
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence

import structlog

from . import memleak, samples
from .args import (
    USAGE,
    InvocationRequest,
    Mode,
    OfflineEngine,
    SelectorKind,
    UsageError,
    parse_arguments,
)
from .config import ConsoleSettings
from .log import configure_logging

logger = structlog.get_logger(__name__)


@dataclass
class SampleCall:
    """The sample chosen for a request. ``name`` is None when nothing runs."""

    banner: str
    name: Optional[str]
    kwargs: Dict[str, Any] = field(default_factory=dict)


def _banner(text: str) -> str:
    return f"=============== {text} ==============="


def select_sample(request: InvocationRequest) -> SampleCall:
    """Choose the sample routine for ``request``.

    Memory leak runs ignore every other option. Otherwise an endpoint wins
    over an offline engine, which wins over base vs customized model.
    """
    key = request.credential.value
    use_token = request.credential.is_token
    filename = request.audio_source.filename
    use_stream = request.audio_source.is_stream
    continuous = request.use_continuous_recognition
    selector = request.selector
    lang = selector.get(SelectorKind.LANGUAGE)
    model_id = selector.get(SelectorKind.MODEL_ID)
    endpoint = selector.get(SelectorKind.ENDPOINT)
    device_name = selector.get(SelectorKind.DEVICE_NAME)
    use_base_model = selector.kind is not SelectorKind.MODEL_ID

    if request.mode is Mode.MEMLEAK:
        kind = None if request.continuous is None else ("cont" if request.continuous else "single")
        return SampleCall(
            _banner("Run memory leak test."),
            "memory_leak_test_async",
            dict(subscription_key=key, region=request.region, filename=filename, kind=kind, use_token=use_token),
        )

    if request.mode is Mode.SPEECH:
        common = dict(
            filename=filename,
            use_stream=use_stream,
            use_continuous_recognition=continuous,
            device_name=device_name,
        )
        if endpoint:
            return SampleCall(
                _banner("Run speech recognition samples by specifying endpoint."),
                "speech_recognition_by_endpoint_async",
                dict(subscription_key=key, endpoint=endpoint, lang=lang, model=model_id, **common),
            )
        regional = dict(subscription_key=key, region=request.region, use_token=use_token, **common)
        if request.offline_engine is OfflineEngine.UNIDEC:
            return SampleCall(
                _banner("Run speech recognition samples using offline Unidec."),
                "speech_recognition_offline_unidec_async",
                dict(lang=lang, **regional),
            )
        if request.offline_engine is OfflineEngine.RNNT:
            return SampleCall(
                _banner("Run speech recognition samples using offline RNN-T."),
                "speech_recognition_offline_rnnt_async",
                dict(lang=lang, **regional),
            )
        if use_base_model:
            return SampleCall(
                _banner("Run speech recognition samples using base model."),
                "speech_recognition_base_model_async",
                dict(lang=lang, **regional),
            )
        return SampleCall(
            _banner("Run speech recognition samples using customized model."),
            "speech_recognition_customized_model_async",
            dict(model_id=model_id, **regional),
        )

    if request.mode is Mode.INTENT:
        common = dict(
            subscription_key=key,
            filename=filename,
            use_continuous_recognition=continuous,
            device_name=device_name,
        )
        if endpoint:
            return SampleCall(
                _banner("Run intent recognition samples by specifying endpoint."),
                "intent_recognition_by_endpoint_async",
                dict(endpoint=endpoint, region=request.region, **common),
            )
        if use_base_model:
            return SampleCall(
                _banner("Run intent recognition samples using base speech model."),
                "intent_recognition_base_model_async",
                dict(region=request.region, **common),
            )
        return SampleCall(_banner("Intent recognition with CRIS model is not supported yet."), None)

    common = dict(
        subscription_key=key,
        filename=filename,
        use_stream=use_stream,
        use_continuous_recognition=continuous,
        device_name=device_name,
    )
    if endpoint:
        return SampleCall(
            _banner("Run translation samples by specifying endpoint."),
            "translation_by_endpoint_async",
            dict(endpoint=endpoint, **common),
        )
    if use_base_model:
        return SampleCall(
            _banner("Run translation samples using base speech model."),
            "translation_base_model_async",
            dict(region=request.region, **common),
        )
    return SampleCall(
        _banner("Run translation samples using customized model."),
        "translation_customized_model_async",
        dict(region=request.region, model_id=model_id, **common),
    )


async def run_sample(call: SampleCall, settings: Optional[ConsoleSettings] = None) -> Any:
    """Await the routine named by ``call``."""
    if call.name is None:
        return None
    module = memleak if call.name == "memory_leak_test_async" else samples
    routine = getattr(module, call.name)
    return await routine(settings=settings, **call.kwargs)


class _ConsoleArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:
        raise UsageError(f"{message}\n{USAGE}")


def build_parser() -> argparse.ArgumentParser:
    # Positionals are left to parse_arguments; only options are declared here
    # so tokens such as "-take1.wav" or a seventh argument pass through.
    parser = _ConsoleArgumentParser(prog="speech-console", usage=USAGE, add_help=True, allow_abbrev=False)
    parser.add_argument("--log-level", default=None, help="log level, defaults to SPEECH_CONSOLE_LOG_LEVEL or INFO")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    try:
        namespace, tokens = build_parser().parse_known_args(argv)
    except UsageError as exc:
        print(exc)
        return 1

    try:
        settings = ConsoleSettings.from_env()
        configure_logging(namespace.log_level or settings.log_level)
        request = parse_arguments(tokens)
    except UsageError as exc:
        print(exc)
        return 1
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    call = select_sample(request)
    logger.debug("sample_selected", sample=call.name, mode=request.mode.value)
    print(call.banner)
    try:
        asyncio.run(run_sample(call, settings))
    except Exception as exc:
        logger.exception("sample_failed", sample=call.name)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0
