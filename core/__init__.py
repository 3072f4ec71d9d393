"""
Core processing modules for ledgersheet.

This package contains:
- config: Application configuration and settings
- exceptions: Custom exception classes
- exporters: Local transformed CSV export
- logger: Logging configuration
- normalize: Per-institution row normalizers
- parsing: Streaming CSV parsing
- pipeline: CSV-to-rows pipeline
- schema: Institutions and normalization tables
"""
