# Shared fixtures for the test-suite.
import sys
from pathlib import Path

import pytest

# Make project root importable (so `formgen` is on sys.path)
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from formgen.generate import ModelInvoker
from formgen.generate.clients.echo_dev_client import EchoDevClient


class SleepRecorder:
    """Stand-in for asyncio.sleep that records delays instead of waiting."""

    def __init__(self):
        self.delays = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def sleeper():
    return SleepRecorder()


@pytest.fixture
def make_invoker(sleeper):
    def _make(script=None, **kwargs):
        client = kwargs.pop("client", None) or EchoDevClient(script=script)
        kwargs.setdefault("sleep", sleeper)
        kwargs.setdefault("rand", lambda: 0.0)
        kwargs.setdefault("timeout", 5.0)
        return ModelInvoker(client, default_model="text-model", vision_model="vision-model", **kwargs)

    return _make
