"""Core utility functions."""

_SYNC_DRIVERS = {
    "+asyncpg": "+psycopg",
    "+aiosqlite": "",
}


def convert_async_db_url_to_sync(database_url: str) -> str:
    """
    Convert an async database URL to a sync database URL.

    Converts postgresql+asyncpg:// to postgresql+psycopg:// (psycopg3) and
    sqlite+aiosqlite:// to plain sqlite:// so Alembic can run migrations with
    a synchronous driver.

    Args:
        database_url: The async database URL (e.g., postgresql+asyncpg://...)

    Returns:
        The sync database URL (e.g., postgresql+psycopg://...)
    """
    scheme, separator, rest = database_url.partition("://")
    if not separator:
        return database_url
    for async_driver, sync_driver in _SYNC_DRIVERS.items():
        if async_driver in scheme:
            return f"{scheme.replace(async_driver, sync_driver)}://{rest}"
    return database_url
