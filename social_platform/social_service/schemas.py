from pydantic import BaseModel, Field

from datetime import datetime
from typing import List, Optional


# Users
class UserCreate(BaseModel):
    name: str = Field(min_length=1)
    surname: Optional[str] = None
    nick: str = Field(min_length=1)
    email: str = Field(min_length=3)
    password: str = Field(min_length=1)
    bio: Optional[str] = None


class UserUpdate(BaseModel):
    name: Optional[str] = None
    surname: Optional[str] = None
    nick: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    bio: Optional[str] = None


class LoginRequest(BaseModel):
    email: str
    password: str


class PublicUser(BaseModel):
    """Profile subset safe to embed in other payloads."""
    id: int
    name: str
    surname: Optional[str] = None
    nick: str
    bio: Optional[str] = None
    image: str
    created_at: datetime

    class Config:
        from_attributes = True


class UserProfile(PublicUser):
    verified: bool


# Companies
class CompanyCreate(BaseModel):
    legal_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    password: str = Field(min_length=1)
    sectors: str = ""
    size: str = ""
    location: str = ""
    website: str = ""
    phone: str = ""
    description: str = ""


class CompanyUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    sectors: Optional[str] = None
    size: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    phone: Optional[str] = None
    description: Optional[str] = None


class CompanyProfile(BaseModel):
    id: int
    legal_id: str
    name: str
    email: str
    sectors: str
    size: str
    location: str
    website: str
    phone: str
    description: str
    image: str
    verified: bool
    created_at: datetime

    class Config:
        from_attributes = True


class CompanySummary(BaseModel):
    id: int
    name: str
    sectors: str

    class Config:
        from_attributes = True


class CompanyCard(CompanySummary):
    location: str
    size: str
    website: str
    phone: str
    description: str
    image: str


# Password reset
class PasswordResetRequest(BaseModel):
    email: str


class PasswordResetConfirm(BaseModel):
    token: str
    new_password: str = Field(min_length=1)


# Follows
class FollowCreate(BaseModel):
    followed: int


class FollowRead(BaseModel):
    id: int
    follower_id: int
    followed_id: int
    created_at: datetime

    class Config:
        from_attributes = True


class FollowingEntry(FollowRead):
    follower: PublicUser
    followed: PublicUser


class FollowerEntry(FollowRead):
    follower: PublicUser


class FollowSaveResponse(BaseModel):
    status: str = "success"
    identity: PublicUser
    follow: FollowRead


class FollowListBase(BaseModel):
    status: str = "success"
    message: str
    total: int
    pages: int
    user_following: List[int] = []
    user_follow_me: List[int] = []


class FollowingListResponse(FollowListBase):
    follows: List[FollowingEntry]


class FollowerListResponse(FollowListBase):
    follows: List[FollowerEntry]


# Publications
class PublicationCreate(BaseModel):
    text: str = Field(min_length=1)
    file: Optional[str] = None


class PublicationRead(BaseModel):
    id: int
    user_id: int
    text: str
    file: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
