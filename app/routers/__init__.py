"""API router package."""

from app.routers import elections, voters

__all__ = [
    "elections",
    "voters",
]
