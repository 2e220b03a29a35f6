# sweet_shop/models/sweet.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

NAME_PATTERN = r"^[a-zA-Z\s\-'&]+$"

class Sweet(BaseModel):
    """A sweet as held by the store. ``id`` and the timestamps are store-assigned."""
    id: Optional[str] = None
    name: str
    category: str
    price: float
    quantity: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

# ---- Request bodies ----
class SweetCreate(BaseModel):
    name: str = Field(..., min_length=3, max_length=50, pattern=NAME_PATTERN)
    category: str = Field(..., min_length=2, max_length=50, pattern=NAME_PATTERN)
    price: float = Field(..., gt=0)
    quantity: int = Field(..., ge=1)

    def to_sweet(self) -> Sweet:
        return Sweet(**self.model_dump())

class SweetUpdate(BaseModel):
    # every field optional; absent fields keep the stored value
    name: Optional[str] = Field(None, min_length=2, max_length=50, pattern=r"^[a-zA-Z\s]+$")
    category: Optional[str] = Field(None, min_length=2, max_length=30, pattern=r"^[^0-9]*$")
    price: Optional[float] = Field(None, ge=0.01)
    quantity: Optional[int] = Field(None, ge=0)

class PurchaseRequest(BaseModel):
    quantity: int = Field(..., ge=1)

class RestockRequest(BaseModel):
    quantity: int = Field(..., ge=1)

# ---- Results ----
class SweetSold(BaseModel):
    sweet: Sweet
    remaining: int
    total_amount: float
