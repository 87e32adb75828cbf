"""
Complaint and user stores over MongoDB collections.

Updates and deletes that match nothing are not errors: they report
matched=False and leave the collection untouched.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from database import COMPLAINTS, COUNTERS, USERS
from errors import DuplicateEmailError, PersistenceError, Unauthorized
from schemas import Complaint, ComplaintCreate, User

logger = logging.getLogger(__name__)

NO_ID = {"_id": 0}

SEED_USERS: List[Dict[str, Any]] = [
    {"role": "teacher", "name": "Dr. Smith", "email": "teacher1@example.com", "pass": "pass123", "id": "T01", "dept": "CSE"},
    {"role": "teacher", "name": "Prof. Jones", "email": "teacher2@example.com", "pass": "pass123", "id": "T02", "dept": "CSE"},
    {"role": "hod", "name": "Head of Department", "email": "ecedepartment100@gmail.com", "pass": "Secure@123", "id": "H01", "dept": "CSE", "isAdmin": True},
]


@dataclass(frozen=True)
class UpdateResult:
    matched: bool


@contextmanager
def store_errors(operation: str):
    """Turn driver faults into PersistenceError carrying the driver message."""
    try:
        yield
    except PyMongoError as e:
        logger.error("%s failed: %s", operation, e)
        raise PersistenceError(str(e), details={"operation": operation}) from e


def _clean(patch: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in patch.items() if k != "_id"}


class ComplaintStore:
    def __init__(self, database: Database):
        self.coll = database[COMPLAINTS]
        self.counters = database[COUNTERS]

    def next_id(self) -> str:
        # the counter only moves forward, so ids freed by a delete are never handed out again
        with store_errors("allocate complaint id"):
            counter = self.counters.find_one_and_update(
                {"_id": COMPLAINTS},
                {"$inc": {"seq": 1}},
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        return str(counter["seq"])

    def list_all(self) -> List[Dict[str, Any]]:
        with store_errors("list complaints"):
            return list(self.coll.find({}, NO_ID))

    def get(self, complaint_id: str) -> Optional[Dict[str, Any]]:
        with store_errors("get complaint"):
            return self.coll.find_one({"id": complaint_id}, NO_ID)

    def create(self, data: ComplaintCreate, complaint_id: str) -> Dict[str, Any]:
        complaint = Complaint(id=complaint_id, **data.model_dump())
        doc = complaint.model_dump(exclude_none=True)
        with store_errors("create complaint"):
            self.coll.insert_one(doc)
        doc.pop("_id", None)
        logger.info("Complaint %s filed by %s", complaint_id, data.studentId)
        return doc

    def file(self, data: ComplaintCreate) -> Dict[str, Any]:
        return self.create(data, self.next_id())

    def update(self, complaint_id: str, patch: Dict[str, Any]) -> UpdateResult:
        patch = _clean(patch)
        with store_errors("update complaint"):
            if not patch:
                return UpdateResult(matched=self.coll.find_one({"id": complaint_id}, NO_ID) is not None)
            res = self.coll.update_one({"id": complaint_id}, {"$set": patch})
        return UpdateResult(matched=res.matched_count > 0)

    def delete(self, complaint_id: str) -> UpdateResult:
        with store_errors("delete complaint"):
            res = self.coll.delete_one({"id": complaint_id})
        return UpdateResult(matched=res.deleted_count > 0)


class UserStore:
    def __init__(self, database: Database):
        self.coll = database[USERS]

    def list_all(self) -> List[Dict[str, Any]]:
        with store_errors("list users"):
            return list(self.coll.find({}, NO_ID))

    def create(self, user: User) -> Dict[str, Any]:
        doc = user.model_dump(by_alias=True, exclude_none=True)
        with store_errors("create user"):
            if self.coll.find_one({"email": user.email}, NO_ID):
                raise DuplicateEmailError(details={"email": user.email})
            try:
                self.coll.insert_one(doc)
            except DuplicateKeyError as e:
                raise DuplicateEmailError(details={"email": user.email}) from e
        doc.pop("_id", None)
        return doc

    def update(self, user_id: str, patch: Dict[str, Any]) -> UpdateResult:
        patch = _clean(patch)
        with store_errors("update user"):
            if not patch:
                return UpdateResult(matched=self.coll.find_one({"id": user_id}, NO_ID) is not None)
            if "email" in patch and self.coll.find_one({"email": patch["email"], "id": {"$ne": user_id}}, NO_ID):
                raise DuplicateEmailError(details={"email": patch["email"]})
            try:
                res = self.coll.update_one({"id": user_id}, {"$set": patch})
            except DuplicateKeyError as e:
                raise DuplicateEmailError(details={"email": patch.get("email")}) from e
        return UpdateResult(matched=res.matched_count > 0)

    def delete_by_email(self, email: str) -> UpdateResult:
        with store_errors("delete user"):
            res = self.coll.delete_one({"email": email})
        return UpdateResult(matched=res.deleted_count > 0)

    def find_by_credentials(self, email: str, password: str) -> Optional[Dict[str, Any]]:
        # plain equality on the stored password, no hashing
        with store_errors("find user by credentials"):
            return self.coll.find_one({"email": email, "pass": password}, NO_ID)

    def authenticate(self, email: str, password: str) -> Dict[str, Any]:
        user = self.find_by_credentials(email, password)
        if user is None:
            raise Unauthorized()
        return user

    def seed_defaults(self) -> int:
        """Insert the demo accounts when no user exists yet. Returns how many were inserted."""
        with store_errors("seed users"):
            if self.coll.count_documents({}) > 0:
                logger.debug("Users present, skipping seed")
                return 0
            docs = [User(**u).model_dump(by_alias=True, exclude_none=True) for u in SEED_USERS]
            self.coll.insert_many(docs)
        logger.info("Default users seeded")
        return len(docs)
