"""
CRUD operations (Create, Read, Update, Delete) for database models.

This layer provides a clean separation between API routes and database operations,
following the Repository pattern.
"""

from app.crud import candidate, department, position, problem, stack, submission, user

__all__ = ["candidate", "department", "position", "problem", "stack", "submission", "user"]
