"""
Requirements Board -- Pydantic Data Models

Every frame that crosses the WebSocket, and every HTTP response body, is
described here. Incoming payloads are validated against these models; a
payload that doesn't fit is dropped by the protocol handler without a reply.

Wire format for the socket is a JSON envelope:

    {"event": "addRequirementsBulk", "data": {"lrns": [...], "reqs": [...]}}
"""

from typing import Any

from pydantic import BaseModel, Field, StrictInt


# ---------------------------------------------------------------------------
# Event names
# ---------------------------------------------------------------------------

class ServerEvent:
    """Events the server sends."""

    database = "database"                  # full registry, once per connection
    student_result = "studentResult"       # reply to studentCheck
    admin_auth = "adminAuth"               # reply to adminLogin
    database_update = "databaseUpdate"     # full registry, broadcast after a mutation


class ClientEvent:
    """Events the server understands."""

    student_check = "studentCheck"
    admin_login = "adminLogin"
    add_requirements_bulk = "addRequirementsBulk"
    remove_requirements_bulk = "removeRequirementsBulk"
    remove_student_bulk = "removeStudentBulk"
    remove_requirement = "removeRequirement"


# ---------------------------------------------------------------------------
# Envelopes
# ---------------------------------------------------------------------------

class ClientMessage(BaseModel):
    """One frame received from a client."""

    event: str = Field(description="Name of the client event.", examples=["studentCheck"])
    data: Any = Field(default=None, description="Event payload; shape depends on the event.")


class ServerMessage(BaseModel):
    """One frame sent to a client."""

    event: str
    data: Any = None


# ---------------------------------------------------------------------------
# Client payloads
# ---------------------------------------------------------------------------

class AdminLogin(BaseModel):
    # Left untyped on purpose: a non-string password is a failed login,
    # not a malformed frame.
    password: Any = None


class AddRequirementsBulk(BaseModel):
    lrns: list[str] = Field(description="Students to update.", examples=[["0016", "0319"]])
    reqs: list[str] = Field(description="Requirements to add to each student.", examples=[["Pillowcase"]])


class LrnsBulk(BaseModel):
    """Payload of removeRequirementsBulk and removeStudentBulk."""

    lrns: list[str] = Field(examples=[["0016"]])


class RemoveRequirement(BaseModel):
    lrn: str = Field(examples=["0288"])
    idx: StrictInt = Field(description="Position in the student's current list.", examples=[1])


# ---------------------------------------------------------------------------
# Server payloads
# ---------------------------------------------------------------------------

class StudentResult(BaseModel):
    lrn: Any = Field(description="The LRN exactly as it was asked for.")
    result: list[str] | None = Field(description="Outstanding requirements, or null when the LRN is unknown.")


class AdminAuth(BaseModel):
    success: bool
    message: str | None = None


# ---------------------------------------------------------------------------
# HTTP responses
# ---------------------------------------------------------------------------

class StudentRequirements(BaseModel):
    lrn: str = Field(examples=["0016"])
    requirements: list[str] = Field(examples=[["Pillowcase", "Marketing Pillowcase"]])


class HealthStatus(BaseModel):
    status: str = Field(examples=["healthy"])
    version: str
    students_stored: int
    connections_open: int
    admin_auth_required: bool
