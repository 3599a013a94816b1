"""
Pytest configuration and fixtures.
"""

import io
from pathlib import Path

import pytest


SAMPLE_CONFIG = (
    'charset="utf-8"\n'
    "[Package]\n"
    'name="hello"\n'
    '--threads:"on"\n'
    "[Author]\n"
    'name="lihf8515"\n'
    'qq="10214028"\n'
    'email="lihaifeng@wxm.com"\n'
)


class FailingStream(io.StringIO):
    """Text stream that raises once its content has been read."""

    def read(self, size: int | None = -1) -> str:
        chunk = super().read(size)
        if not chunk:
            raise OSError("disk gone")
        return chunk


@pytest.fixture
def sample_text() -> str:
    """Small configuration with a default section, options and sections."""
    return SAMPLE_CONFIG


@pytest.fixture
def sample_path(tmp_path: Path) -> Path:
    """Sample configuration written to a file."""
    path = tmp_path / "config.ini"
    path.write_bytes(SAMPLE_CONFIG.encode("utf-8"))
    return path


@pytest.fixture
def failing_stream() -> type[FailingStream]:
    """Stream class whose reads fail after its content is consumed."""
    return FailingStream
