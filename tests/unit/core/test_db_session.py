import pytest
from loguru import logger

from libros_api.core.services.database.db_session import DbEngineService
from libros_api.runtime.config.config_data import ConfigData, DatabaseConfig


@pytest.fixture
def log_messages():
    messages: list[str] = []
    handler_id = logger.add(messages.append, format="{message}")
    yield messages
    logger.remove(handler_id)


class TestDbEngineService:
    @pytest.mark.asyncio
    async def test_engine_url_is_logged_without_password(self, monkeypatch, log_messages):
        monkeypatch.setenv("DB_PASSWORD", "hunter2")
        config = ConfigData(
            database=DatabaseConfig(host="db", user="libros", name="biblioteca")
        )

        service = DbEngineService(config)
        try:
            assert service.backend == "mysql"
            assert any("libros:***@db:3306/biblioteca" in m for m in log_messages)
            assert not any("hunter2" in m for m in log_messages)
        finally:
            await service.dispose()

    def test_missing_settings_raise_value_error(self, monkeypatch):
        monkeypatch.delenv("DB_PASSWORD", raising=False)

        with pytest.raises(ValueError, match="DB_HOST"):
            DbEngineService(ConfigData(database=DatabaseConfig()))

    @pytest.mark.asyncio
    async def test_memory_database_uses_single_shared_connection(self):
        config = ConfigData(database=DatabaseConfig(url="sqlite+aiosqlite:///:memory:"))

        service = DbEngineService(config)
        try:
            assert await service.health_check() is True
            assert service.backend == "sqlite"
        finally:
            await service.dispose()
