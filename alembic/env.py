"""Alembic environment for the Tripmate schema."""
from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from alembic import context

from config import settings
from database import Base
# Register every mapped table on Base.metadata
import models.expense  # noqa: F401
import models.friend_request  # noqa: F401
import models.group  # noqa: F401
import models.message  # noqa: F401
import models.note  # noqa: F401
import models.notification  # noqa: F401
import models.trip  # noqa: F401
import models.user  # noqa: F401

config = context.config

# Programmatic callers (tests) keep their own logging setup
if config.config_file_name is not None and config.attributes.get("configure_logger", True):
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = Base.metadata

if not config.get_main_option("sqlalchemy.url"):
    config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)


def run_migrations_offline() -> None:
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=connection.dialect.name == "sqlite",
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
