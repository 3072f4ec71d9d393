"""
Remote sheet integration for transformed rows.

This package contains:
- base: Sink interface consumed by the sync service
- client: Google Sheets client wrapper
"""
