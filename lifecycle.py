"""
Complaint lifecycle helpers.

Status is an open label and assignment is independent of it: nothing here
checks whether a transition is allowed. Each helper builds a patch from the
record it is given; the patch is applied through ComplaintStore.update, so
history and chat are written back as whole arrays.
"""

from typing import Any, Dict, Optional

from schemas import ChatMessage, ComplaintUpdate, HistoryEntry
from stores import ComplaintStore, UpdateResult


def build_patch(update: ComplaintUpdate) -> Dict[str, Any]:
    """Only the fields the caller actually sent."""
    return update.model_dump(exclude_unset=True)


def _history(complaint: Dict[str, Any], entry: HistoryEntry):
    return list(complaint.get("history") or []) + [entry.model_dump(exclude_none=True)]


def status_patch(complaint: Dict[str, Any], status: str, by: Optional[str] = None,
                 note: Optional[str] = None) -> Dict[str, Any]:
    entry = HistoryEntry(action=status, by=by, note=note)
    return {"status": status, "history": _history(complaint, entry)}


def assignment_patch(complaint: Dict[str, Any], staff_id: Optional[str],
                     by: Optional[str] = None) -> Dict[str, Any]:
    action = f"Assigned to {staff_id}" if staff_id else "Unassigned"
    entry = HistoryEntry(action=action, by=by)
    return {"assignedTo": staff_id or "", "history": _history(complaint, entry)}


def chat_patch(complaint: Dict[str, Any], sender: str, text: str) -> Dict[str, Any]:
    message = ChatMessage(sender=sender, text=text)
    return {"chat": list(complaint.get("chat") or []) + [message.model_dump()]}


def apply(store: ComplaintStore, complaint_id: str, make_patch, *args, **kwargs) -> UpdateResult:
    """Read the complaint, build a patch from it and write it back.

    A missing complaint is a no-op with matched=False, same as a plain update.
    """
    complaint = store.get(complaint_id)
    if complaint is None:
        return UpdateResult(matched=False)
    return store.update(complaint_id, make_patch(complaint, *args, **kwargs))
