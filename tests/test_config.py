"""Tests for SpeechConfig URLs and ConsoleSettings environment parsing."""
import pytest

from speech_console import ConsoleSettings, SpeechConfig


def test_speech_config_constructor():
    """Test SpeechConfig can be constructed with named parameters."""
    # Test with subscription key
    config1 = SpeechConfig(subscription="key123", region="westus")
    assert config1.subscription_key == "key123"
    assert config1.region == "westus"

    # Test with authorization token
    config2 = SpeechConfig(authorization_token="token456", region="eastus")
    assert config2.authorization_token == "token456"
    assert config2.region == "eastus"


def test_regional_urls():
    config = SpeechConfig.from_subscription("key", region="westus")
    assert config.stt_url == "https://westus.stt.speech.microsoft.com/speech/recognition/conversation/cognitiveservices/v1"
    assert config.translation_url == "https://westus.stt.speech.microsoft.com/speech/translation/cognitiveservices/v1"
    assert config.intent_url("abc") == (
        "https://westus.api.cognitive.microsoft.com/luis/prediction/v3.0/apps/abc/slots/production/predict"
    )


def test_host_urls_and_validation():
    config = SpeechConfig.from_host("http://localhost:5000/")
    config.validate()
    assert config.stt_url == "http://localhost:5000/speech/recognition/conversation/cognitiveservices/v1"


def test_recognition_params():
    config = SpeechConfig.from_subscription("key", region="westus", speech_recognition_language="de-DE", endpoint_id="m1")
    assert config.recognition_params("detailed") == {"format": "detailed", "language": "de-DE", "cid": "m1"}
    assert SpeechConfig.from_subscription("key", region="westus").recognition_params() == {"format": "simple"}


@pytest.mark.parametrize(
    "config",
    [
        SpeechConfig(subscription="key"),
        SpeechConfig(region="westus"),
    ],
)
def test_validate_rejects_incomplete_config(config):
    with pytest.raises(ValueError):
        config.validate()


def test_intent_url_requires_region():
    with pytest.raises(ValueError):
        SpeechConfig.from_endpoint("https://example.com", "key").intent_url("app")


def test_settings_defaults():
    settings = ConsoleSettings.from_env({})
    assert settings == ConsoleSettings()
    assert settings.translation_targets == ("de", "fr")
    assert settings.intent_app_id is None


def test_settings_from_environment():
    settings = ConsoleSettings.from_env(
        {
            "SPEECH_CONSOLE_TIMEOUT": "30",
            "SPEECH_CONSOLE_UNIDEC_HOST": "http://device:9000",
            "SPEECH_CONSOLE_INTENT_APP_ID": "app-7",
            "SPEECH_CONSOLE_TRANSLATION_TARGETS": "es, it ,",
            "SPEECH_CONSOLE_MEMLEAK_ITERATIONS": "3",
            "SPEECH_CONSOLE_LOG_LEVEL": "debug",
        }
    )
    assert settings.timeout == 30.0
    assert settings.unidec_host == "http://device:9000"
    assert settings.intent_app_id == "app-7"
    assert settings.translation_targets == ("es", "it")
    assert settings.memleak_iterations == 3
    assert settings.log_level == "DEBUG"


def test_settings_reject_malformed_numbers():
    with pytest.raises(ValueError) as exc:
        ConsoleSettings.from_env({"SPEECH_CONSOLE_MEMLEAK_ITERATIONS": "many"})
    assert "SPEECH_CONSOLE_MEMLEAK_ITERATIONS" in str(exc.value)


@pytest.mark.parametrize("value", [",", " , ,", "   "])
def test_settings_blank_translation_targets_fall_back_to_defaults(value):
    settings = ConsoleSettings.from_env({"SPEECH_CONSOLE_TRANSLATION_TARGETS": value})
    assert settings.translation_targets == ("de", "fr")
