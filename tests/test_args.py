import pytest

from speech_console.args import (
    ArgumentError,
    AudioSourceKind,
    InvalidSelectorError,
    MissingValueError,
    Mode,
    OfflineEngine,
    SelectorKind,
    UnsupportedCombinationError,
    UnsupportedModeError,
    UsageError,
    parse_arguments,
)


def test_speech_with_mic_and_language():
    request = parse_arguments(["speech", "key", "westus", "mic", "lang:en-US"])

    assert request.mode is Mode.SPEECH
    assert request.credential.value == "key"
    assert request.credential.is_token is False
    assert request.region == "westus"
    assert request.audio_source.kind is AudioSourceKind.MICROPHONE
    assert request.audio_source.filename is None
    assert request.selector.kind is SelectorKind.LANGUAGE
    assert request.selector.value == "en-US"
    assert request.offline_engine is None
    assert request.continuous is None


def test_fewer_than_three_arguments_is_a_usage_error():
    with pytest.raises(UsageError) as exc:
        parse_arguments(["speech", "key"])
    assert "Usage:" in str(exc.value)


@pytest.mark.parametrize("token", ["bogus", "speechx", "recognize:cont", ""])
def test_unknown_mode_is_rejected_with_its_name(token):
    with pytest.raises(UnsupportedModeError) as exc:
        parse_arguments([token, "key", "westus"])
    assert exc.value.mode == token.split(":")[0]
    assert exc.value.token == token
    assert f"not supported: {token}" in str(exc.value)


def test_mode_is_case_insensitive():
    assert parse_arguments(["Translation", "key", "westus"]).mode is Mode.TRANSLATION


def test_submode_sets_continuous_flag():
    assert parse_arguments(["speech:cont", "key", "westus"]).continuous is True
    assert parse_arguments(["speech:SINGLE", "key", "westus"]).continuous is False
    assert parse_arguments(["memleak:cont", "key", "westus"]).continuous is True


def test_unknown_submode_is_rejected():
    with pytest.raises(ArgumentError) as exc:
        parse_arguments(["speech:forever", "key", "westus"])
    assert "only cont or single" in str(exc.value)
    assert "speech:forever" in str(exc.value)


def test_token_credential():
    request = parse_arguments(["speech", "TOKEN:abc", "westus"])
    assert request.credential.value == "abc"
    assert request.credential.is_token is True


@pytest.mark.parametrize("key", ["", "token:"])
def test_empty_credential_is_rejected(key):
    with pytest.raises(MissingValueError):
        parse_arguments(["speech", key, "westus"])


@pytest.mark.parametrize("mode", ["intent", "translation"])
def test_token_with_intent_or_translation_rejects_before_region(mode):
    # The region is empty too; the credential rule must fire first.
    with pytest.raises(UnsupportedCombinationError) as exc:
        parse_arguments([mode, "token:abc", ""])
    assert mode in str(exc.value)


def test_translation_with_token_and_file_is_rejected():
    with pytest.raises(UnsupportedCombinationError):
        parse_arguments(["translation", "token:abc", "westus", "file.wav"])


@pytest.mark.parametrize(
    "argv",
    [
        ["speech", "key", ""],
        ["memleak", "key", "", "file.wav"],
        ["intent", "key", "", "mic", "lang:en-US", "unidec"],
    ],
)
def test_empty_region_is_rejected(argv):
    with pytest.raises(MissingValueError) as exc:
        parse_arguments(argv)
    assert "region" in str(exc.value)


def test_stream_source_records_path():
    request = parse_arguments(["speech", "key", "westus", "stream:audio/input.wav"])
    assert request.audio_source.kind is AudioSourceKind.STREAM
    assert request.audio_source.is_stream is True
    assert request.audio_source.filename == "audio/input.wav"


def test_stream_source_without_path_is_rejected():
    with pytest.raises(MissingValueError):
        parse_arguments(["speech", "key", "westus", "stream:"])


def test_bare_path_is_a_file_source():
    request = parse_arguments(["speech", "key", "westus", "whatstheweatherlike.wav"])
    assert request.audio_source.kind is AudioSourceKind.FILE
    assert request.audio_source.filename == "whatstheweatherlike.wav"
    assert request.audio_source.is_stream is False


def test_empty_audio_token_means_microphone():
    request = parse_arguments(["speech", "key", "westus", ""])
    assert request.audio_source.kind is AudioSourceKind.MICROPHONE


@pytest.mark.parametrize(
    "token, kind, value",
    [
        ("lang:de-DE", SelectorKind.LANGUAGE, "de-DE"),
        ("model:1234-abcd", SelectorKind.MODEL_ID, "1234-abcd"),
        ("endpoint:wss://example.com/speech?x=1", SelectorKind.ENDPOINT, "wss://example.com/speech?x=1"),
        ("DeviceName:hw:1,0", SelectorKind.DEVICE_NAME, "hw:1,0"),
    ],
)
def test_selectors(token, kind, value):
    request = parse_arguments(["speech", "key", "westus", "mic", token])
    assert request.selector.kind is kind
    assert request.selector.value == value
    assert request.selector.get(kind) == value


@pytest.mark.parametrize("token", ["lang:", "model:", "endpoint:", "devicename:"])
def test_selector_without_value_is_rejected(token):
    with pytest.raises(MissingValueError):
        parse_arguments(["speech", "key", "westus", "mic", token])


def test_unknown_selector_enumerates_allowed_values():
    with pytest.raises(InvalidSelectorError) as exc:
        parse_arguments(["speech", "key", "westus", "mic", "voice:jenny"])
    message = str(exc.value)
    for allowed in ("lang:", "model:", "endpoint:", "devicename:"):
        assert allowed in message


def test_endpoint_with_token_is_rejected():
    with pytest.raises(UnsupportedCombinationError):
        parse_arguments(["speech", "token:abc", "westus", "mic", "endpoint:https://example.com"])


@pytest.mark.parametrize("audio", ["file.wav", "stream:file.wav"])
def test_device_name_with_file_source_is_rejected(audio):
    with pytest.raises(UnsupportedCombinationError):
        parse_arguments(["speech", "key", "westus", audio, "devicename:1"])


@pytest.mark.parametrize("audio", ["mic", "MIC", ""])
def test_device_name_with_microphone_succeeds(audio):
    request = parse_arguments(["speech", "key", "westus", audio, "devicename:1"])
    assert request.selector.value == "1"


@pytest.mark.parametrize(
    "token, engine",
    [("unidec", OfflineEngine.UNIDEC), ("RNNT", OfflineEngine.RNNT), ("whisper", None), ("", None)],
)
def test_offline_engine_unknown_values_are_ignored(token, engine):
    request = parse_arguments(["speech", "key", "westus", "mic", "lang:en-US", token])
    assert request.offline_engine is engine


def test_memleak_ignores_later_tokens_semantics():
    request = parse_arguments(["memleak:cont", "key", "westus", "file.wav", "lang:en-US", "rnnt"])
    assert request.mode is Mode.MEMLEAK
    assert request.continuous is True
    assert request.audio_source.filename == "file.wav"


def test_tokens_after_the_sixth_are_ignored():
    request = parse_arguments(["speech", "key", "westus", "mic", "lang:en-US", "unidec", "extra", "more"])
    assert request.offline_engine is OfflineEngine.UNIDEC
    assert request.selector.value == "en-US"
