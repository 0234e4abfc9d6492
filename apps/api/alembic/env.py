from logging.config import fileConfig
import os

from sqlalchemy import engine_from_config, pool
from alembic import context

from dotenv import load_dotenv

# -------------------------------------------------------------------
# Load environment variables (.env in apps/api/)
# -------------------------------------------------------------------
load_dotenv()

config = context.config

# -------------------------------------------------------------------
# Override sqlalchemy.url from DATABASE_URL
# (avoids alembic.ini interpolation issues)
# -------------------------------------------------------------------
db_url = os.getenv("DATABASE_URL")
if not db_url:
    raise RuntimeError("DATABASE_URL is not set. Check apps/api/.env")

config.set_main_option("sqlalchemy.url", db_url)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# -------------------------------------------------------------------
# Import models & metadata for autogenerate
# -------------------------------------------------------------------
from shiftplan.core.database import Base  # noqa: E402
from shiftplan.models.manager import Manager  # noqa: F401,E402
from shiftplan.models.restaurant import Restaurant  # noqa: F401,E402
from shiftplan.models.role import Role  # noqa: F401,E402
from shiftplan.models.employee import Employee  # noqa: F401,E402
from shiftplan.models.employee_role import EmployeeRole  # noqa: F401,E402
from shiftplan.models.shift_template import ShiftTemplate, ShiftTemplateRole  # noqa: F401,E402
from shiftplan.models.schedule import Schedule  # noqa: F401,E402
from shiftplan.models.scheduled_shifts import ScheduledShift  # noqa: F401,E402

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    url = config.get_main_option("sqlalchemy.url")

    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
