import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker

from umbrelscan.db.database import build_engine, init_db
from umbrelscan.db.instance_store import get_stored_instance, store_instance, normalize_instance_url


@pytest.fixture
async def session(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}")
    await init_db(engine)
    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session
    await engine.dispose()


@pytest.mark.parametrize("address,url", [
    ("192.168.1.20", "http://192.168.1.20"),
    ("  umbrel.local ", "http://umbrel.local"),
    ("http://192.168.1.20", "http://192.168.1.20"),
    ("https://umbrel.example", "https://umbrel.example"),
])
def test_normalize_instance_url(address, url):
    assert normalize_instance_url(address) == url


@pytest.mark.parametrize("address", ["", "   ", None])
def test_normalize_rejects_empty_address(address):
    with pytest.raises(ValueError):
        normalize_instance_url(address)


async def test_nothing_stored_initially(session):
    assert await get_stored_instance(session) is None


async def test_store_and_read_back(session):
    url = await store_instance(session, "192.168.1.20")

    assert url == "http://192.168.1.20"
    assert await get_stored_instance(session) == "http://192.168.1.20"


async def test_storing_again_replaces_the_instance(session):
    await store_instance(session, "192.168.1.20")
    await store_instance(session, "http://umbrel.local")

    assert await get_stored_instance(session) == "http://umbrel.local"
