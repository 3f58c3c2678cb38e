from typing import Optional
from pydantic import BaseModel, EmailStr, UUID4, Field
from datetime import datetime


# Shared properties
class StudentBase(BaseModel):
    full_name: str
    email: EmailStr
    student_number: str


# Properties to receive via API on creation (POST /auth/register)
class StudentCreate(StudentBase):
    password: str = Field(..., min_length=6)


# Properties to receive via API on admin creation (POST /auth/admin/register)
class AdminCreate(StudentCreate):
    admin_secret: str


class StudentInDBBase(StudentBase):
    id: UUID4
    role: str
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# Properties returned via API
class Student(StudentInDBBase):
    pass


# Compact student for nested responses (admin reservation view)
class StudentSummary(BaseModel):
    id: UUID4
    full_name: str
    email: str
    student_number: str

    class Config:
        from_attributes = True


class Token(BaseModel):
    access_token: str
    token_type: str
    student: Student


class TokenPayload(BaseModel):
    sub: Optional[str] = None
    role: Optional[str] = None
