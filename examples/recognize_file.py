"""
Example: recognize a WAV file using subscription key or AAD bearer token.

Environment variables:
- AZURE_SPEECH_KEY (optional when AZURE_SPEECH_TOKEN provided)
- AZURE_SPEECH_TOKEN (bearer token)
- AZURE_SPEECH_REGION (e.g., eastus)
"""
import asyncio
import os
import sys

from speech_console import AudioConfig, SpeechConfig, SpeechRecognizer


async def main(filename: str) -> None:
    region = os.environ.get("AZURE_SPEECH_REGION", "eastus")
    key = os.environ.get("AZURE_SPEECH_KEY")
    token = os.environ.get("AZURE_SPEECH_TOKEN")
    if token:
        speech_config = SpeechConfig.from_authorization_token(token, region=region)
    elif key:
        speech_config = SpeechConfig.from_subscription(key, region=region)
    else:
        raise SystemExit("Set AZURE_SPEECH_KEY or AZURE_SPEECH_TOKEN.")
    speech_config.speech_recognition_language = "en-US"

    async with SpeechRecognizer(speech_config, AudioConfig(filename=filename)) as recognizer:
        result = await recognizer.recognize_once_async()
    print(f"Recognized: {result.text}")
    print(f"  Result reason: {result.reason}")


if __name__ == "__main__":
    if len(sys.argv) != 2:
        raise SystemExit("Usage: recognize_file.py <file.wav>")
    asyncio.run(main(sys.argv[1]))
