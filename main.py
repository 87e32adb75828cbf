import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pymongo.errors import PyMongoError

import database
import lifecycle
from config import settings
from errors import GrievanceError, PersistenceError
from logging_config import setup_logging
from notifier import EmailNotifier
from promotion import promote_all_students
from schemas import ComplaintCreate, ComplaintUpdate, User, UserUpdate
from stores import ComplaintStore, UserStore

logger = logging.getLogger(__name__)


def initialize(db) -> None:
    """Confirm connectivity, then create indexes and seed the demo accounts."""
    database.ping(db)
    logger.info("MongoDB Connected")
    database.ensure_indexes(db)
    UserStore(db).seed_defaults()


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    if database.db is None:
        logger.warning("DATABASE_URL not set, running without a database")
    else:
        try:
            initialize(database.db)
        except PyMongoError as e:
            logger.error("MongoDB Error: %s", e)
    yield
    if database.client is not None:
        database.client.close()


app = FastAPI(title="Grievance Portal API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def limit_body_size(request: Request, call_next):
    too_large = JSONResponse(status_code=413, content={"success": False, "error": "Payload too large"})
    length = request.headers.get("content-length")
    if length and length.isdigit():
        if int(length) > settings.MAX_BODY_BYTES:
            return too_large
    elif request.method in ("POST", "PUT", "PATCH"):
        # chunked upload: no declared length, so measure what actually arrived;
        # body() caches it for the endpoint
        if len(await request.body()) > settings.MAX_BODY_BYTES:
            return too_large
    return await call_next(request)


@app.exception_handler(GrievanceError)
async def grievance_error_handler(request: Request, exc: GrievanceError):
    return JSONResponse(status_code=exc.status_code, content={"success": False, "error": exc.message})


# --------- Dependencies ---------

def get_db():
    if database.db is None:
        raise PersistenceError("Database not configured")
    return database.db


def get_user_store(db=Depends(get_db)) -> UserStore:
    return UserStore(db)


def get_complaint_store(db=Depends(get_db)) -> ComplaintStore:
    return ComplaintStore(db)


def get_notifier() -> EmailNotifier:
    return EmailNotifier()


# --------- Request Models ---------
class LoginRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str
    password: str = Field(..., alias="pass")


class StatusChange(BaseModel):
    status: str
    by: Optional[str] = None
    note: Optional[str] = None


class Assignment(BaseModel):
    assignedTo: Optional[str] = None
    by: Optional[str] = None


class NewChatMessage(BaseModel):
    sender: str
    text: str


class EmailRequest(BaseModel):
    to: str
    subject: str = ""
    text: str = ""


# --------- Routes ---------
@app.get("/")
def root():
    return {"service": "Grievance Portal API"}


@app.get("/test")
def test_database():
    resp = {
        "backend": "running",
        "database": "not connected",
        "collections": []
    }
    try:
        if database.db is not None:
            resp["database"] = "connected"
            resp["collections"] = database.db.list_collection_names()
    except PyMongoError as e:
        resp["database"] = f"error: {e}"
    return resp


# Auth & users
@app.post("/api/login")
def login(payload: LoginRequest, users: UserStore = Depends(get_user_store)):
    return users.authenticate(payload.email, payload.password)


@app.post("/api/register")
def register(data: User, users: UserStore = Depends(get_user_store)):
    users.create(data)
    return {"success": True}


@app.get("/api/users")
def list_users(users: UserStore = Depends(get_user_store)):
    return users.list_all()


@app.post("/api/users/promote")
def promote_students(db=Depends(get_db)):
    return {"success": True, "updated": promote_all_students(db)}


@app.put("/api/users/{user_id}")
def update_user(user_id: str, data: UserUpdate, users: UserStore = Depends(get_user_store)):
    res = users.update(user_id, data.model_dump(by_alias=True, exclude_unset=True))
    return {"success": True, "matched": res.matched}


@app.delete("/api/users/{email}")
def delete_user(email: str, users: UserStore = Depends(get_user_store)):
    res = users.delete_by_email(email)
    return {"success": True, "matched": res.matched}


# Complaints
@app.get("/api/complaints")
def list_complaints(complaints: ComplaintStore = Depends(get_complaint_store)):
    return complaints.list_all()


@app.post("/api/complaints")
def file_complaint(data: ComplaintCreate, complaints: ComplaintStore = Depends(get_complaint_store)):
    doc = complaints.file(data)
    return {"success": True, "id": doc["id"], "complaint": doc}


@app.put("/api/complaints/{complaint_id}")
def update_complaint(complaint_id: str, data: ComplaintUpdate,
                     complaints: ComplaintStore = Depends(get_complaint_store)):
    res = complaints.update(complaint_id, lifecycle.build_patch(data))
    return {"success": True, "matched": res.matched}


@app.delete("/api/complaints/{complaint_id}")
def delete_complaint(complaint_id: str, complaints: ComplaintStore = Depends(get_complaint_store)):
    res = complaints.delete(complaint_id)
    return {"success": True, "matched": res.matched}


@app.post("/api/complaints/{complaint_id}/status")
def change_status(complaint_id: str, data: StatusChange,
                  complaints: ComplaintStore = Depends(get_complaint_store)):
    res = lifecycle.apply(complaints, complaint_id, lifecycle.status_patch, data.status, by=data.by, note=data.note)
    return {"success": True, "matched": res.matched}


@app.post("/api/complaints/{complaint_id}/assign")
def assign_complaint(complaint_id: str, data: Assignment,
                     complaints: ComplaintStore = Depends(get_complaint_store)):
    res = lifecycle.apply(complaints, complaint_id, lifecycle.assignment_patch, data.assignedTo, by=data.by)
    return {"success": True, "matched": res.matched}


@app.post("/api/complaints/{complaint_id}/chat")
def post_chat(complaint_id: str, data: NewChatMessage,
              complaints: ComplaintStore = Depends(get_complaint_store)):
    res = lifecycle.apply(complaints, complaint_id, lifecycle.chat_patch, data.sender, data.text)
    return {"success": True, "matched": res.matched}


# Email
@app.post("/send-email")
def send_email(data: EmailRequest, notifier: EmailNotifier = Depends(get_notifier)):
    notifier.send(data.to, data.subject, data.text)
    return {"success": True, "message": "Email sent successfully"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
