from pydantic import BaseModel


class UserSession(BaseModel):
    """Identity of the caller for the current request.

    Built once from the bearer token and handed explicitly to whatever needs
    to know who is acting.
    """

    user_id: str
    role: str
    name: str = ""
    email: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @classmethod
    def from_claims(cls, claims: dict) -> "UserSession":
        return cls(
            user_id=str(claims["sub"]),
            role=claims.get("role") or "customer",
            name=claims.get("name") or "",
            email=claims.get("email") or "",
        )
