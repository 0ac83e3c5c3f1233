from typing import Optional
from datetime import datetime

from .base import MongoBaseModel


class User(MongoBaseModel):
    name: str
    email: str
    password: Optional[str] = None
    role: str = "user"  # user | admin
    createdAt: Optional[datetime] = None
