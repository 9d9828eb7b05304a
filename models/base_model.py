#!/usr/bin/env python3
"""
Shared SQLAlchemy base and mixin for the Member API.

- Integer autoincrement primary key assigned by the database on insert
- created_at / updated_at timestamps with server-side defaults
- keyword-argument constructor and a readable __str__

Notes:
- func.now() maps to CURRENT_TIMESTAMP on SQLite.
- Persistence goes through DBStorage (models.storage) or a repository on top of it.
"""

from __future__ import annotations

from sqlalchemy import Column, Integer, DateTime
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

# Declarative base for all models
Base = declarative_base()


class BaseModel:
    """
    Base mixin for all persistent models: id, created_at, updated_at.
    """

    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __init__(self, *args, **kwargs):
        """
        Allow attribute initialization via kwargs without requiring a session here.
        The id stays None until the row is flushed.
        """
        for key, value in kwargs.items():
            if key != "__class__":
                setattr(self, key, value)

    def __str__(self) -> str:
        """Human-friendly representation including id."""
        return f"[{self.__class__.__name__}] ({self.id})"
