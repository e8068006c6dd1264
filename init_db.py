from campus.backend.src.core.config import get_settings
from campus.backend.src.core.context import build_context
from campus.backend.src.core.logging import configure_logging
from campus.backend.src.db import init_db as create_tables


def init_db():
    settings = get_settings()
    configure_logging(settings.log_level)
    context = build_context(settings)
    print(f"🚀 Connecting to {context.settings.database_url}")
    create_tables(context)
    context.dispose()
    print("✅ Tables created successfully!")


if __name__ == "__main__":
    init_db()
