"""
Bookstore API Test Suite

Tests are organized into:
- unit/: security helpers, services against an in-memory database, and
  routes with mocked services
- integration/: full HTTP flows against an in-memory database
"""
