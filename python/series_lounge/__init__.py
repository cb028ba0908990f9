"""Series Lounge API bootstrap."""
