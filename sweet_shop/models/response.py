from typing import Any

from pydantic import BaseModel

class ApiResponse(BaseModel):
    """Envelope for every JSON body the API returns."""
    message: str
    data: Any = None
