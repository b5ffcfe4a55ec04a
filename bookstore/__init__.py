"""
Bookstore - example REST backend for users and books.

Subpackages:
- storage: SQLAlchemy models
- services: business logic per resource
- api: FastAPI application, routes and middleware
"""

__version__ = "1.0.0"
