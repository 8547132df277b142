import pytest


@pytest.fixture
def anyio_backend():
    # The application is built on asyncio (FastAPI/uvicorn, asyncio.to_thread).
    return "asyncio"
