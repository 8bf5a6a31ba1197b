from pydantic import BaseModel


class SessionSaveRequest(BaseModel):
    remember_me: bool = False


class RememberMeRequest(BaseModel):
    enabled: bool
