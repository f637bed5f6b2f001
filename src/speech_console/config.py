import os
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple


class SpeechConfig:
    """Configuration for Azure Speech REST endpoints.

    Mimics the official Azure Speech SDK's SpeechConfig class.
    """

    def __init__(
        self,
        *,
        subscription: Optional[str] = None,
        region: Optional[str] = None,
        authorization_token: Optional[str] = None,
        endpoint: Optional[str] = None,
        host: Optional[str] = None,
        endpoint_id: Optional[str] = None,
        speech_recognition_language: Optional[str] = None,
        # Support both parameter names for backward compatibility
        subscription_key: Optional[str] = None,
    ) -> None:
        """Initialize SpeechConfig.

        Args:
            subscription: Azure subscription key (official SDK parameter name)
            region: Azure region (e.g., 'eastus', 'westus')
            authorization_token: Authorization token (alternative to subscription key)
            endpoint: Full recognition URL, used verbatim (optional)
            host: Base URL of an on-device or container speech service (optional)
            endpoint_id: Customized model deployment id (optional)
            speech_recognition_language: Recognition language, service default when unset
            subscription_key: Alias for 'subscription' (backward compatibility)
        """
        self.region = region
        # Support both 'subscription' and 'subscription_key' parameters
        self.subscription_key = subscription or subscription_key
        self.authorization_token = authorization_token
        self.endpoint = endpoint
        self.host = host
        self.endpoint_id = endpoint_id
        self.speech_recognition_language = speech_recognition_language

    @classmethod
    def from_subscription(cls, subscription_key: str, region: str, **kwargs) -> "SpeechConfig":
        """Create SpeechConfig from subscription key.

        Args:
            subscription_key: Azure subscription key
            region: Azure region
            **kwargs: Additional configuration options

        Returns:
            SpeechConfig instance
        """
        return cls(region=region, subscription_key=subscription_key, **kwargs)

    @classmethod
    def from_authorization_token(cls, token: str, region: str, **kwargs) -> "SpeechConfig":
        return cls(region=region, authorization_token=token, **kwargs)

    @classmethod
    def from_endpoint(cls, endpoint: str, subscription_key: str, **kwargs) -> "SpeechConfig":
        return cls(endpoint=endpoint, subscription_key=subscription_key, **kwargs)

    @classmethod
    def from_host(cls, host: str, **kwargs) -> "SpeechConfig":
        return cls(host=host, **kwargs)

    @property
    def _stt_base(self) -> str:
        if self.host:
            return self.host.rstrip("/")
        return f"https://{self.region}.stt.speech.microsoft.com"

    @property
    def stt_url(self) -> str:
        if self.endpoint:
            return self.endpoint
        return f"{self._stt_base}/speech/recognition/conversation/cognitiveservices/v1"

    @property
    def translation_url(self) -> str:
        if self.endpoint:
            return self.endpoint
        return f"{self._stt_base}/speech/translation/cognitiveservices/v1"

    def intent_url(self, app_id: str) -> str:
        if not self.region:
            raise ValueError("region is required for intent recognition")
        return (
            f"https://{self.region}.api.cognitive.microsoft.com"
            f"/luis/prediction/v3.0/apps/{app_id}/slots/production/predict"
        )

    def recognition_params(self, format: str = "simple") -> Dict[str, str]:
        params = {"format": format}
        if self.speech_recognition_language:
            params["language"] = self.speech_recognition_language
        if self.endpoint_id:
            params["cid"] = self.endpoint_id
        return params

    def validate(self) -> None:
        if not (self.region or self.endpoint or self.host):
            raise ValueError("region, endpoint or host is required for SpeechConfig")
        if self.host:
            # On-device hosts accept unauthenticated requests.
            return
        if not (self.subscription_key or self.authorization_token):
            raise ValueError("Either subscription_key or authorization_token must be provided.")


ENV_PREFIX = "SPEECH_CONSOLE_"


@dataclass(frozen=True)
class ConsoleSettings:
    """Runtime knobs for the sample routines, read from ``SPEECH_CONSOLE_*`` variables."""

    timeout: float = 15.0
    record_seconds: float = 5.0
    segment_seconds: float = 15.0
    unidec_host: str = "http://localhost:5000"
    rnnt_host: str = "http://localhost:5001"
    intent_app_id: Optional[str] = None
    translation_targets: Tuple[str, ...] = ("de", "fr")
    memleak_iterations: int = 10
    memleak_threshold_kb: int = 1024
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ConsoleSettings":
        env = os.environ if environ is None else environ
        defaults = cls()

        def read(name: str, default, convert=str):
            raw = env.get(ENV_PREFIX + name)
            if raw is None or raw.strip() == "":
                return default
            try:
                return convert(raw.strip())
            except ValueError:
                raise ValueError(f"{ENV_PREFIX}{name} has an invalid value: {raw!r}") from None

        targets = tuple(t.strip() for t in read("TRANSLATION_TARGETS", "").split(",") if t.strip())
        return cls(
            timeout=read("TIMEOUT", defaults.timeout, float),
            record_seconds=read("RECORD_SECONDS", defaults.record_seconds, float),
            segment_seconds=read("SEGMENT_SECONDS", defaults.segment_seconds, float),
            unidec_host=read("UNIDEC_HOST", defaults.unidec_host),
            rnnt_host=read("RNNT_HOST", defaults.rnnt_host),
            intent_app_id=read("INTENT_APP_ID", defaults.intent_app_id),
            translation_targets=targets or defaults.translation_targets,
            memleak_iterations=read("MEMLEAK_ITERATIONS", defaults.memleak_iterations, int),
            memleak_threshold_kb=read("MEMLEAK_THRESHOLD_KB", defaults.memleak_threshold_kb, int),
            log_level=read("LOG_LEVEL", defaults.log_level).upper(),
        )
