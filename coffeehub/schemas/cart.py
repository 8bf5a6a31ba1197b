from enum import Enum
from pydantic import BaseModel, Field, field_validator


class CartSize(str, Enum):
    SMALL = "Small"
    MEDIUM = "Medium"
    LARGE = "Large"


class CartLineItem(BaseModel):
    id: str = ""
    product_id: str = Field(min_length=1)
    product_name: str = ""
    product_image: str = ""
    size: CartSize = CartSize.MEDIUM
    quantity: int = Field(default=1, ge=1)
    price: float = Field(default=0.0, ge=0)  # unit price snapshot at add-time

    @property
    def line_total(self) -> float:
        return self.price * self.quantity

    def to_dict(self):
        data = self.model_dump(mode="json")
        data["line_total"] = self.line_total
        return data


class AddToCartRequest(BaseModel):
    product_id: str = Field(min_length=1)
    size: CartSize = CartSize.MEDIUM
    quantity: int = Field(default=1, ge=1)


class UpdateQuantityRequest(BaseModel):
    product_id: str = Field(min_length=1)
    quantity: int


class RemoveFromCartRequest(BaseModel):
    product_id: str = Field(min_length=1)

    @field_validator("product_id")
    @classmethod
    def _strip(cls, v: str) -> str:
        return v.strip()
