from pathlib import Path

import pytest
import pytest_asyncio

from task_tracker.client import AsyncTaskTracker
from task_tracker.config import Settings

from fakes import ANON_KEY, BASE_URL, EMAIL, PASSWORD, FakeBackend


@pytest.fixture()
def backend() -> FakeBackend:
    b = FakeBackend()
    b.add_user(EMAIL, PASSWORD)
    return b


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        supabase_url=BASE_URL,
        supabase_anon_key=ANON_KEY,
        config_dir=tmp_path,
    )


@pytest.fixture()
def alerts() -> list[str]:
    return []


@pytest_asyncio.fixture
async def client(backend: FakeBackend, settings: Settings, alerts: list[str]):
    c = AsyncTaskTracker(settings=settings, alert=alerts.append, transport=backend.transport())
    yield c
    await c.close()


@pytest_asyncio.fixture
async def signed_in(client: AsyncTaskTracker) -> AsyncTaskTracker:
    assert await client.sign_in(EMAIL, PASSWORD)
    return client
