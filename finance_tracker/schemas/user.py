# finance_tracker/schemas/user.py
from typing import Optional
from datetime import datetime
import uuid
from pydantic import BaseModel, EmailStr

# Returned on GET /users/me
class ProfileRead(BaseModel):
    id: uuid.UUID
    email: EmailStr
    display_name: Optional[str] = None
    created_at: Optional[datetime] = None
