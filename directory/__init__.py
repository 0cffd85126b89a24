"""User directory backends."""

from .abstract_directory import AbstractUserDirectory
from .sql_directory import SQLAlchemyUserDirectory

__all__ = ["AbstractUserDirectory", "SQLAlchemyUserDirectory"]
