"""
Request models for API commands
Bodies accepted by the handlers that are not plain entity records
"""

from typing import Literal, Optional

from pydantic import Field

from .base import BaseModel
from .entities import LocalDate, TodoStatus

# ============================================================================
# Generic Record Request Models
# ============================================================================


class DeleteItemRequest(BaseModel):
    """Request parameters for deleting a record.

    @property id - Identifier of the record to delete.
    """

    id: str = Field(min_length=1)


class ToggleItemRequest(BaseModel):
    """Request parameters for flipping a boolean flag (pin, executed, completion).

    @property id - Identifier of the record to toggle.
    """

    id: str = Field(min_length=1)


# ============================================================================
# Task Request Models
# ============================================================================


class TodoViewRequest(BaseModel):
    """Request parameters for the grouped task list.

    @property filter - One of all, today, upcoming, completed.
    @property completedDate - Optional YYYY-MM-DD; only tasks completed that day are kept.
    """

    filter: Literal["all", "today", "upcoming", "completed"] = "all"
    completed_date: Optional[LocalDate] = None


class SetTodoStatusRequest(BaseModel):
    """Request parameters for moving a task to a status.

    @property id - Task identifier.
    @property status - Target status (any transition is allowed).
    """

    id: str = Field(min_length=1)
    status: TodoStatus


# ============================================================================
# Daily Capture Request Models
# ============================================================================


class MoveEntryRequest(BaseModel):
    """Request parameters for moving a daily entry one slot.

    @property id - Entry identifier.
    @property direction - up or down.
    """

    id: str = Field(min_length=1)
    direction: Literal["up", "down"]


# ============================================================================
# Shell Request Models
# ============================================================================


class ThemeRequest(BaseModel):
    """Request parameters for storing the theme preference.

    @property theme - light or dark.
    """

    theme: Literal["light", "dark"]
