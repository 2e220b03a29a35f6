import re
from enum import Enum
from typing import List, Optional, Set

from pydantic import BaseModel, EmailStr, Field, field_validator

PASSWORD_RULE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[#@$!%*?&]).{8,}$")

class RoleType(str, Enum):
    ADMIN = "ADMIN"
    USER = "USER"

class User(BaseModel):
    id: Optional[str] = None
    username: str
    password_hash: str
    roles: Set[RoleType] = Field(default_factory=lambda: {RoleType.USER})

    def has_role(self, role: RoleType) -> bool:
        return role in self.roles

class UserCreate(BaseModel):
    username: EmailStr
    password: str

    @field_validator("password")
    @classmethod
    def check_strength(cls, value: str) -> str:
        if not PASSWORD_RULE.match(value):
            raise ValueError(
                "Password must contain at least one uppercase letter, one lowercase letter, "
                "one number, and one special character"
            )
        return value

class UserLogin(BaseModel):
    username: EmailStr
    password: str = Field(..., min_length=1)

class SignupResponse(BaseModel):
    id: str
    username: str

class LoginResponse(BaseModel):
    jwt: str
    user_id: str
    roles: List[RoleType]
