"""
Test suite for web-reader.

Provides tests for all modules:
- Unit tests against an in-memory page
- CLI tests through Typer's test runner
- Browser integration tests against a local test site
"""
