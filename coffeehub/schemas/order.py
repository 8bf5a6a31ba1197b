from pydantic import BaseModel, Field, field_validator
from models.order import OrderStatus, PaymentMethod


class CustomerInfo(BaseModel):
    customer_name: str
    customer_phone: str
    payment_method: PaymentMethod = PaymentMethod.CASH
    notes: str = Field(default="", max_length=500)

    @field_validator("customer_name", "customer_phone", "notes")
    @classmethod
    def _strip(cls, v: str) -> str:
        return v.strip()

    @field_validator("customer_name")
    @classmethod
    def _name_required(cls, v: str) -> str:
        if not v:
            raise ValueError("Please enter your name")
        return v

    @field_validator("customer_phone")
    @classmethod
    def _phone_valid(cls, v: str) -> str:
        if not v:
            raise ValueError("Please enter your phone number")
        if len(v) < 10:
            raise ValueError("Please enter a valid phone number")
        return v


class StatusUpdateRequest(BaseModel):
    status: OrderStatus
