"""
Data entity model definitions
Define the eight record types tracked by the dashboard and their closed value sets
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Optional

from pydantic import AfterValidator, Field, computed_field, model_validator

from core.dates import ensure_local_date, get_local_date, utc_timestamp, week_start

from .base import BaseModel


def _new_id() -> str:
    return str(uuid.uuid4())


def _current_week() -> str:
    return week_start(datetime.now()).isoformat()


# Calendar day as YYYY-MM-DD; views and insights parse these, so nothing else is stored
LocalDate = Annotated[str, AfterValidator(ensure_local_date)]


# ============ Closed sets ============


class Category(str, Enum):
    CONTENT = "Content"
    BLOG = "Blog"
    PRODUCT = "Product"
    DEEP_WORK = "Deep_Work"
    LIFE = "Life"
    GROWTH = "Growth"
    RANDOM = "Random"


class Urgency(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class IdeaStatus(str, Enum):
    INBOX = "Inbox"
    ARCHIVED = "Archived"
    APPROVED = "Approved"


class Platform(str, Enum):
    X = "X"
    LINKEDIN = "LinkedIn"
    YOUTUBE = "YouTube"


class OutcomeStatus(str, Enum):
    SUCCESSFUL = "Successful"
    PARTIAL = "Partial"
    FAILED = "Failed"


class TodoPriority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class TodoStatus(str, Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


class TimeSlot(str, Enum):
    MORNING = "Morning"
    AFTERNOON = "Afternoon"
    EVENING = "Evening"
    NIGHT = "Night"
    ANYTIME = "Anytime"


class DecisionStatus(str, Enum):
    PENDING = "Pending"
    DECIDED = "Decided"


class DiscoveryImpact(str, Enum):
    LINEAR = "Linear"
    EXPONENTIAL = "Exponential"
    DISRUPTIVE = "Disruptive"


class ExpenseCategory(str, Enum):
    HOUSE_RENT = "House Rent"
    GROCERIES = "Groceries"
    EATING_OUT = "Eating Out"
    SUBSCRIPTIONS = "Subscriptions"
    SHOPPING = "Shopping"
    MISCELLANEOUS = "Miscellaneous"


# ============ Entities ============


class DailyEntry(BaseModel):
    """Daily log - what was worked on and what shipped on a given day"""

    id: str = Field(default_factory=_new_id)
    date: LocalDate = Field(default_factory=get_local_date)
    worked_on: str = ""
    shipped: str = ""
    trace_date: str = ""
    pinned: bool = False
    position: int = 0


class Idea(BaseModel):
    """Captured thought waiting in the inbox"""

    id: str = Field(default_factory=_new_id)
    date: LocalDate = Field(default_factory=get_local_date)
    thought: str = ""
    category: Category
    urgency: Urgency
    status: IdeaStatus = IdeaStatus.INBOX
    # Only meaningful for Content ideas
    platform: Optional[Platform] = None
    executed: bool = False
    pinned: bool = False
    trace_date: str = ""


class WeeklyOutcome(BaseModel):
    """Build / ship / learn goals for one week"""

    id: str = Field(default_factory=_new_id)
    week_starting: LocalDate = Field(default_factory=_current_week)
    build: str = ""
    ship: str = ""
    learn: str = ""
    status: OutcomeStatus
    review_generated: bool = False
    trace_date: str = ""

    @property
    def achieved(self) -> bool:
        return self.status == OutcomeStatus.SUCCESSFUL


class Todo(BaseModel):
    """Task with a deadline

    ``status`` is authoritative; ``completed`` is derived from it and only kept in
    serialized output for clients and backend rows that still read the flag.
    """

    id: str = Field(default_factory=_new_id)
    title: str = ""
    details: str = ""
    deadline: LocalDate = Field(default_factory=get_local_date)
    priority: TodoPriority
    status: TodoStatus = TodoStatus.PENDING
    created_at: str = Field(default_factory=utc_timestamp)
    trace_date: str = ""
    time_slot: Optional[TimeSlot] = None
    target_time: Optional[str] = None
    pinned: bool = False
    completed_at: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _absorb_completed_flag(cls, data: Any) -> Any:
        """Legacy input may carry only the boolean; turn it into a status"""
        if isinstance(data, dict) and "completed" in data:
            data = dict(data)
            completed = data.pop("completed")
            if not data.get("status"):
                data["status"] = (
                    TodoStatus.COMPLETED.value if completed else TodoStatus.PENDING.value
                )
        return data

    @computed_field
    @property
    def completed(self) -> bool:
        return self.status == TodoStatus.COMPLETED

    def with_status(self, status: TodoStatus, now: Optional[datetime] = None) -> "Todo":
        """Copy moved to status; entering Completed stamps completedAt, leaving clears it"""
        if status == TodoStatus.COMPLETED:
            if self.status == TodoStatus.COMPLETED and self.completed_at:
                completed_at = self.completed_at
            else:
                completed_at = utc_timestamp(now)
        else:
            completed_at = None
        return self.model_copy(update={"status": status, "completed_at": completed_at})

    def toggled(self, now: Optional[datetime] = None) -> "Todo":
        if self.completed:
            return self.with_status(TodoStatus.PENDING, now)
        return self.with_status(TodoStatus.COMPLETED, now)


class DecisionGate(BaseModel):
    id: str = Field(default_factory=_new_id)
    date: LocalDate = Field(default_factory=get_local_date)
    decision: str = ""
    outcome: str = ""
    status: DecisionStatus = DecisionStatus.PENDING
    trace_date: str = ""


class Contact(BaseModel):
    """Network contact; company may encode a role as 'CTO at Acme'"""

    id: str = Field(default_factory=_new_id)
    name: str = ""
    company: str = ""
    email: str = ""
    linkedin: str = ""
    x_account: str = ""
    notes: str = ""
    date_added: LocalDate = Field(default_factory=get_local_date)
    trace_date: str = ""
    avatar_url: Optional[str] = None


class Discovery(BaseModel):
    id: str = Field(default_factory=_new_id)
    title: str = ""
    url: str = ""
    description: str = ""
    category: str = ""
    impact: DiscoveryImpact = DiscoveryImpact.LINEAR
    date_added: LocalDate = Field(default_factory=get_local_date)
    trace_date: str = ""
    pinned: bool = False


class Expense(BaseModel):
    id: str = Field(default_factory=_new_id)
    title: str = ""
    amount: float = 0.0
    category: ExpenseCategory
    date: LocalDate = Field(default_factory=get_local_date)
    created_at: str = Field(default_factory=utc_timestamp)
    trace_date: str = ""
