from pydantic import BaseModel, EmailStr, Field


# 1. For Registration (Input)
class UserCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6)


# 2. For Login (Input)
class UserLogin(BaseModel):
    email: str
    password: str


# 3. For Responses (Output)
class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    role: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str
