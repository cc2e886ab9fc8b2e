from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .database import with_db_retry
from .models import StoredSetting

INSTANCE_KEY = "umbrel_instance"


def normalize_instance_url(address: str) -> str:
    """Turn a bare host or address into a URL, e.g. "10.0.0.5" -> "http://10.0.0.5"."""
    address = (address or "").strip()
    if not address:
        raise ValueError("Instance address must not be empty")
    return address if address.startswith("http") else f"http://{address}"


@with_db_retry()
async def get_stored_instance(session: AsyncSession) -> Optional[str]:
    """Get the URL of the last connected instance, if any."""
    result = await session.execute(select(StoredSetting).where(StoredSetting.key == INSTANCE_KEY))
    setting = result.scalar_one_or_none()
    return setting.value if setting else None


@with_db_retry()
async def store_instance(session: AsyncSession, address: str) -> str:
    """Remember ``address`` as the last connected instance and return its URL."""
    url = normalize_instance_url(address)

    setting = await session.get(StoredSetting, INSTANCE_KEY)
    if setting is None:
        session.add(StoredSetting(key=INSTANCE_KEY, value=url))
    else:
        setting.value = url

    try:
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    return url
