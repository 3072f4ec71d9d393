"""
Service layer for business logic.

This package contains the service that orchestrates a sync run:
configuration checks, CSV normalization, the local transformed copy
and the append to the remote sheet.
"""
