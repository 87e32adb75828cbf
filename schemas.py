"""
Database Schemas for the grievance portal

Each Pydantic model describes a document in a MongoDB collection.
Users live in "users", complaints in "complaints". Field names are the
stored camelCase keys.
"""

from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["student", "teacher", "hod"]


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class User(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(None, description="Caller-assigned user id")
    role: Optional[Role] = Field(None, description="student|teacher|hod")
    name: Optional[str] = Field(None)
    email: str = Field(..., description="Unique login key")
    password: Optional[str] = Field(None, alias="pass", description="Plain password, compared as-is")
    dept: Optional[str] = Field(None)
    year: Optional[str] = Field(None, description='"1".."4" or "Graduated" for students')
    enroll: Optional[str] = Field(None, description="Enrollment number")
    isAdmin: bool = False


class UserUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    role: Optional[Role] = None
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = Field(None, alias="pass")
    dept: Optional[str] = None
    year: Optional[str] = None
    enroll: Optional[str] = None
    isAdmin: Optional[bool] = None


class HistoryEntry(BaseModel):
    model_config = ConfigDict(extra="allow")

    action: str = Field(..., description="What happened, e.g. a status label")
    by: Optional[str] = Field(None, description="Id of the acting user")
    note: Optional[str] = None
    time: str = Field(default_factory=now_iso)


class ChatMessage(BaseModel):
    model_config = ConfigDict(extra="allow")

    sender: str
    text: str
    time: str = Field(default_factory=now_iso)


class Complaint(BaseModel):
    id: str = Field(..., description="Sequence id allocated on filing")
    studentId: Optional[str] = None
    studentName: Optional[str] = None
    category: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    attachment: Optional[str] = Field(None, description="Embedded file, e.g. a data URI")
    isAnon: bool = False
    status: Optional[str] = Field(None, description="Free-form lifecycle label")
    assignedTo: Optional[str] = Field(None, description="Id of the handling staff member")
    history: List[dict] = []
    chat: List[dict] = []
    timestamp: Optional[str] = None


class ComplaintCreate(BaseModel):
    studentId: Optional[str] = None
    studentName: Optional[str] = None
    category: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    attachment: Optional[str] = None
    isAnon: bool = False
    status: Optional[str] = None
    assignedTo: Optional[str] = None
    history: List[dict] = []
    chat: List[dict] = []
    timestamp: Optional[str] = None


class ComplaintUpdate(BaseModel):
    studentId: Optional[str] = None
    studentName: Optional[str] = None
    category: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    attachment: Optional[str] = None
    isAnon: Optional[bool] = None
    status: Optional[str] = None
    assignedTo: Optional[str] = None
    history: Optional[List[dict]] = None
    chat: Optional[List[dict]] = None
    timestamp: Optional[str] = None
