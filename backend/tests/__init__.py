"""
Pytest suite for the Bookshelf Reader backend.

Test categories:
- Unit tests: resolver, form validation, auth helpers, validators
- Integration tests: services against in-memory SQLite
- API tests: full FastAPI app over an ASGI transport
"""
