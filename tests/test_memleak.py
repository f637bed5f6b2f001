import asyncio

import httpx

from speech_console import ConsoleSettings
from speech_console.audio import to_wav
from speech_console.memleak import LeakReport, memory_leak_test_async


def test_leak_report_growth():
    report = LeakReport(kind="single", iterations=5, baseline_bytes=1000, final_bytes=5000, threshold_bytes=2048)
    assert report.growth_bytes == 4000
    assert report.leaked is True

    report = LeakReport(kind="single", iterations=5, baseline_bytes=1000, final_bytes=1500, threshold_bytes=2048)
    assert report.leaked is False


def test_memory_leak_test_runs_every_iteration(tmp_path):
    path = tmp_path / "a.wav"
    path.write_bytes(to_wav(b"\x00\x00" * 16000 * 2))
    requests = []

    async def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"DisplayText": "x"})

    settings = ConsoleSettings(memleak_iterations=4, segment_seconds=1.0)

    single = asyncio.run(
        memory_leak_test_async(
            "key", "westus", str(path), None, settings=settings, async_transport=httpx.MockTransport(handler)
        )
    )
    assert single.kind == "single"
    assert single.iterations == 4
    assert len(requests) == 4

    requests.clear()
    cont = asyncio.run(
        memory_leak_test_async(
            "key", "westus", str(path), "cont", settings=settings, async_transport=httpx.MockTransport(handler)
        )
    )
    assert cont.kind == "cont"
    # Two one-second segments per iteration.
    assert len(requests) == 8
