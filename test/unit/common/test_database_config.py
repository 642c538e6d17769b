# Copyright (C) 2010-2026 Evolveum and contributors
#
# Licensed under the EUPL-1.2 or later.

from crmgen.common.database.config import engine_options
from crmgen.config import DatabaseSettings


def test_sqlite_engine_gets_busy_timeout():
    settings = DatabaseSettings(path="/tmp/cache.db", busy_timeout=5)

    options = engine_options(settings)

    assert settings.url == "sqlite+aiosqlite:////tmp/cache.db"
    assert options["connect_args"] == {"timeout": 5}
    assert options["pool_pre_ping"] is True


def test_other_engines_keep_driver_defaults():
    settings = DatabaseSettings(url="postgresql+asyncpg://user:secret@db:5432/mapping", echo=True)

    options = engine_options(settings)

    assert "connect_args" not in options
    assert options["echo"] is True
