"""Thin API launcher.

This is the uvicorn entrypoint. All application logic lives in the series_lounge package.
Run with: uvicorn main:app --reload

For the full bootstrap (PORT resolution, base URL logging) use the
`series-lounge` console script instead.
"""

from series_lounge.app import configure_app, create_application
from series_lounge.config import get_settings
from series_lounge.logging import configure_logging

settings = get_settings()
configure_logging(json_format=settings.json_logs, level=settings.log_level)

app = configure_app(create_application(settings=settings, raw_body=True))

__all__ = ["app"]
