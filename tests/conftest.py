import pytest

from tests._fake_cl import FakeCL


@pytest.fixture
def fake_cl(monkeypatch):
    """Replace the PyOpenCL entry points with a simulated device."""
    return FakeCL().install(monkeypatch)


@pytest.fixture
def messages():
    """Pass ``messages.append`` as ``report`` to collect progress messages."""
    return []
