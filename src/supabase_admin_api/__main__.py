"""
Entry point: python -m supabase_admin_api

Env:
    SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY, DATABASE_URL (required)
    PORT (default 3000), HOST (default 0.0.0.0)
"""

import uvicorn

from supabase_admin_api.api.app import create_app
from supabase_admin_api.settings import get_settings, load_env


def main() -> None:
    load_env()
    settings = get_settings()
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
