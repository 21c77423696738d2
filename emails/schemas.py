from pydantic import BaseModel
from typing import Any, Optional

class EmailRead(BaseModel):
    id: int
    sender: str
    subject: str
    body: Optional[str]
    received_at: str

    class Config:
        from_attributes = True

# fields are relayed as given; the provider decides what is valid
class SendRequest(BaseModel):
    to: Any = None
    subject: Any = None
    text: Any = None
