from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from .config import settings
from .models import Base


def _coerce_async_dsn(dsn: str) -> str:
    """
    The ledger engine is async: plain postgres:// or postgresql:// DSNs are
    rewritten to postgresql+asyncpg://. Other schemes (e.g. sqlite+aiosqlite)
    pass through unchanged.
    """
    if "://" not in dsn:
        return dsn

    scheme, rest = dsn.split("://", 1)
    if "+asyncpg" in scheme:
        return dsn

    if scheme in ("postgres", "postgresql") or scheme.startswith("postgresql+"):
        return f"postgresql+asyncpg://{rest}"

    return dsn


engine = create_async_engine(_coerce_async_dsn(settings.POSTGRES_DSN), echo=False, future=True)

AsyncSessionLocal: async_sessionmaker[AsyncSession] = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def init_db() -> None:
    """
    Create the ledger table if it does not exist yet.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()
