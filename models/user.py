from pydantic import BaseModel


class UserIdentityDTO(BaseModel):
    """Identity as reported by the external identity provider."""
    id: str
    email: str | None = None
    full_name: str | None = None
