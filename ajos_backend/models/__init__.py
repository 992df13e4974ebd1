"""
Models for API communication
Entity records and request bodies exchanged with the front end
"""

from .base import BaseModel
from .entities import (
    Category,
    Contact,
    DailyEntry,
    DecisionGate,
    DecisionStatus,
    Discovery,
    DiscoveryImpact,
    Expense,
    ExpenseCategory,
    Idea,
    IdeaStatus,
    OutcomeStatus,
    Platform,
    TimeSlot,
    Todo,
    TodoPriority,
    TodoStatus,
    Urgency,
    WeeklyOutcome,
)
from .requests import (
    DeleteItemRequest,
    MoveEntryRequest,
    SetTodoStatusRequest,
    ThemeRequest,
    TodoViewRequest,
    ToggleItemRequest,
)

__all__ = [
    # Base
    "BaseModel",
    # Closed sets
    "Category",
    "Urgency",
    "IdeaStatus",
    "Platform",
    "OutcomeStatus",
    "TodoPriority",
    "TodoStatus",
    "TimeSlot",
    "DecisionStatus",
    "DiscoveryImpact",
    "ExpenseCategory",
    # Entities
    "DailyEntry",
    "Idea",
    "WeeklyOutcome",
    "Todo",
    "DecisionGate",
    "Contact",
    "Discovery",
    "Expense",
    # Requests
    "DeleteItemRequest",
    "ToggleItemRequest",
    "TodoViewRequest",
    "SetTodoStatusRequest",
    "MoveEntryRequest",
    "ThemeRequest",
]
