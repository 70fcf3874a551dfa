"""
Identity and API result data models for the authentication service.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar


class UserRole(str, Enum):
    """Roles a console principal can hold"""
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    MANAGER = "manager"
    OPERATOR = "operator"
    VIEWER = "viewer"


class UserStatus(str, Enum):
    """Account status of a console principal"""
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"
    PENDING = "pending"


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp, accepting a trailing 'Z'"""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _pick(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """First present key wins; the API answers in camelCase or snake_case"""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


@dataclass
class Identity:
    """Authenticated principal"""
    id: str
    email: str
    full_name: str
    role: UserRole = UserRole.VIEWER
    status: UserStatus = UserStatus.ACTIVE
    created_at: datetime = field(default_factory=utc_now)
    last_login_at: Optional[datetime] = None
    avatar_url: Optional[str] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        # Raises ValueError for anything outside the enumerations
        self.role = UserRole(self.role)
        self.status = UserStatus(self.status)

    @property
    def is_first_login(self) -> bool:
        return self.last_login_at is None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Identity':
        """
        Build an Identity from an API or storage payload

        Raises:
            ValueError: missing id/email or unknown role/status
            TypeError: payload is not a mapping
        """
        if not isinstance(data, dict):
            raise TypeError(f"Identity payload must be an object, got {type(data).__name__}")

        identity_id = _pick(data, "id", "pk", "user_id")
        email = _pick(data, "email")
        if identity_id is None or not email:
            raise ValueError("Identity payload requires 'id' and 'email'")

        return cls(
            id=str(identity_id),
            email=email,
            full_name=_pick(data, "fullName", "full_name", default=""),
            role=_pick(data, "role", default=UserRole.VIEWER.value),
            status=_pick(data, "status", default=UserStatus.ACTIVE.value),
            created_at=parse_timestamp(_pick(data, "createdAt", "created_at")) or utc_now(),
            last_login_at=parse_timestamp(_pick(data, "lastLoginAt", "last_login_at", "last_login")),
            avatar_url=_pick(data, "avatarUrl", "avatar_url"),
            updated_at=parse_timestamp(_pick(data, "updatedAt", "updated_at")),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the console's camelCase wire names"""
        data = {
            "id": self.id,
            "email": self.email,
            "fullName": self.full_name,
            "role": self.role.value,
            "status": self.status.value,
            "createdAt": format_timestamp(self.created_at),
        }
        if self.last_login_at is not None:
            data["lastLoginAt"] = format_timestamp(self.last_login_at)
        if self.avatar_url is not None:
            data["avatarUrl"] = self.avatar_url
        if self.updated_at is not None:
            data["updatedAt"] = format_timestamp(self.updated_at)
        return data

    @staticmethod
    def profile_changes(**fields: Any) -> Dict[str, Any]:
        """
        Partial update body for the editable identity fields

        Takes attribute names (``full_name=...``) and returns the same
        camelCase wire names ``to_dict`` uses.

        Raises:
            ValueError: a field that is not editable
        """
        unknown = set(fields) - set(EDITABLE_PROFILE_FIELDS)
        if unknown:
            raise ValueError(f"Not editable profile fields: {', '.join(sorted(unknown))}")
        return {EDITABLE_PROFILE_FIELDS[name]: value for name, value in fields.items()}


EDITABLE_PROFILE_FIELDS = {
    "full_name": "fullName",
    "email": "email",
    "avatar_url": "avatarUrl",
}


@dataclass
class RegistrationProfile:
    """Data collected by the registration form"""
    full_name: str
    email: str
    password: str
    confirm_password: str

    @property
    def derived_username(self) -> str:
        return self.email.split("@")[0]

    def to_payload(self) -> Dict[str, Any]:
        return {
            "email": self.email,
            "password": self.password,
            "confirm_password": self.confirm_password,
            "username": self.derived_username,
            "full_name": self.full_name,
        }


@dataclass
class AuthSession:
    """Result of a successful credential exchange"""
    user: Identity
    access_token: str


T = TypeVar("T")


@dataclass
class ApiResponse(Generic[T]):
    """Outcome of a remote call: data on success, a message on failure"""
    success: bool
    data: Optional[T] = None
    message: str = ""

    @classmethod
    def ok(cls, data: T) -> 'ApiResponse[T]':
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, message: str) -> 'ApiResponse[T]':
        return cls(success=False, message=message)
