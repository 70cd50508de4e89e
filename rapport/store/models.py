from dataclasses import dataclass, asdict
from typing import Dict, Optional

PENDING = "pending"
APPROVED = "approved"
REJECTED = "rejected"


@dataclass
class User:
    id: str
    username: str
    password_hash: str = ""
    is_admin: bool = False
    created_at: int = 0

    def to_hash(self) -> Dict[str, str]:
        return {
            "id": self.id,
            "username": self.username,
            "password_hash": self.password_hash,
            "is_admin": "1" if self.is_admin else "0",
            "created_at": str(self.created_at),
        }

    @classmethod
    def from_hash(cls, data: Dict[str, str]) -> "User":
        return cls(
            id=data["id"],
            username=data["username"],
            password_hash=data.get("password_hash", ""),
            is_admin=data.get("is_admin") == "1",
            created_at=int(data.get("created_at") or 0),
        )

    def public(self) -> dict:
        # Never expose the password hash past the store
        return {"id": self.id, "username": self.username, "isAdmin": self.is_admin, "createdAt": self.created_at}


@dataclass
class FollowRequest:
    from_user: str
    to_user: str
    created_at: int = 0
    status: str = PENDING


@dataclass
class FollowEdge:
    follower: str
    followee: str
    since: int = 0


@dataclass
class VerificationRequest:
    user: str
    credentials: str
    status: str = PENDING
    created_at: int = 0

    def to_hash(self) -> Dict[str, str]:
        return {k: str(v) for k, v in asdict(self).items()}

    @classmethod
    def from_hash(cls, data: Dict[str, str]) -> "VerificationRequest":
        return cls(
            user=data["user"],
            credentials=data.get("credentials", ""),
            status=data.get("status", PENDING),
            created_at=int(data.get("created_at") or 0),
        )


@dataclass
class VerifiedRecord:
    user: str
    verified_at: int = 0
    approved_by: Optional[str] = None

    def to_hash(self) -> Dict[str, str]:
        return {"user": self.user, "verified_at": str(self.verified_at), "approved_by": self.approved_by or ""}

    @classmethod
    def from_hash(cls, data: Dict[str, str]) -> "VerifiedRecord":
        return cls(
            user=data["user"],
            verified_at=int(data.get("verified_at") or 0),
            approved_by=data.get("approved_by") or None,
        )


@dataclass
class Message:
    id: int
    sender: str
    recipient: str
    content: str
    timestamp: int

    def to_hash(self) -> Dict[str, str]:
        return {k: str(v) for k, v in asdict(self).items()}

    @classmethod
    def from_hash(cls, data: Dict[str, str]) -> "Message":
        return cls(
            id=int(data["id"]),
            sender=data["sender"],
            recipient=data["recipient"],
            content=data.get("content", ""),
            timestamp=int(data.get("timestamp") or 0),
        )
