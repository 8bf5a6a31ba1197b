from pydantic import BaseModel, Field, field_validator
from typing import Optional


class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    price: float = Field(ge=0)
    category: str = ""
    description: str = ""
    stock: int = Field(default=0, ge=0)
    image_url: str = ""
    is_available: bool = True
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    extra: Optional[str] = None

    @field_validator("name", "category")
    @classmethod
    def _not_blank(cls, v: str, info):
        v = v.strip()
        if info.field_name == "name" and not v:
            raise ValueError("name must not be blank")
        return v


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    price: Optional[float] = Field(default=None, ge=0)
    category: Optional[str] = None
    description: Optional[str] = None
    stock: Optional[int] = Field(default=None, ge=0)
    image_url: Optional[str] = None
    is_available: Optional[bool] = None
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    extra: Optional[str] = None

    def changes(self) -> dict:
        """Fields the caller actually sent.

        A new stock level without an explicit availability flag also sets
        availability: in stock means available.
        """
        data = self.model_dump(exclude_unset=True)
        if "stock" in data and "is_available" not in data:
            data["is_available"] = data["stock"] > 0
        return data
