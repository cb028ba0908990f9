"""Middleware modules for the Series Lounge API."""

from series_lounge.middleware.cookie_parser import CookieParserMiddleware, parse_cookie_header
from series_lounge.middleware.raw_body import RawBodyMiddleware
from series_lounge.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware

__all__ = [
    "CookieParserMiddleware",
    "RawBodyMiddleware",
    "RequestIDMiddleware",
    "REQUEST_ID_HEADER",
    "parse_cookie_header",
]
