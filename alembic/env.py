"""
Alembic environment: runs migrations against teamboard's DATABASE_URL.
"""
from alembic import context

from teamboard.database import Base, engine
import teamboard.models.activity_log  # noqa: F401
import teamboard.models.daily_metric  # noqa: F401
import teamboard.models.user  # noqa: F401

target_metadata = Base.metadata


def run_migrations_offline():
    context.configure(
        url=engine.url.render_as_string(hide_password=False),
        target_metadata=target_metadata,
        literal_binds=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    with engine.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
