"""
Resources module - content banks and collaborator interfaces.
"""

from quest_engine.resources.database import (
    ContentDatabase,
    ContentProvider,
    CategoryLookup,
    Prompt,
    PROMPT_SCHEMA,
)

__all__ = [
    "ContentDatabase",
    "ContentProvider",
    "CategoryLookup",
    "Prompt",
    "PROMPT_SCHEMA",
]
