from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

Status = Literal["pending", "approved", "rejected"]

# --- request bodies ---

class CreateUserBody(BaseModel):
    username: str
    password: str
    adminKey: Optional[str] = None

class LoginBody(BaseModel):
    username: str
    password: str

class UpdateUsernameBody(BaseModel):
    username: str

class UpdatePasswordBody(BaseModel):
    currentPassword: str
    newPassword: str

class VerificationRequestBody(BaseModel):
    # Blank credentials are rejected by the workflow (400), not by the schema (422)
    credentials: str = ""

class SendMessageBody(BaseModel):
    recipient: str
    content: str

# --- responses ---

class FollowRequestOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: str = Field(alias="from")
    to: str
    status: Status = "pending"
    createdAt: int

class MessageOut(BaseModel):
    id: int
    sender: str
    recipient: str
    content: str
    # ISO-8601 UTC with millisecond precision; accepted back by DELETE /messages/delete
    timestamp: str
    timestampMs: int

class VerificationRequestOut(BaseModel):
    user: str
    credentials: str
    status: Status
    createdAt: int

class VerifiedUserOut(BaseModel):
    user: str
    verifiedAt: int
    approvedBy: Optional[str] = None

class VerifiedPage(BaseModel):
    items: List[VerifiedUserOut]
    offset: int
    limit: int
    total: int

class RequestPage(BaseModel):
    items: List[VerificationRequestOut]
    offset: int
    limit: int
    total: int
