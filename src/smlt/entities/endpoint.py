"""BackendEndpoint entity - resolved read endpoint of a search core."""

import base64
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class Credentials(BaseModel):
    """HTTP basic-auth credentials; either part may be missing."""

    model_config = ConfigDict(frozen=True)

    username: Optional[str] = None
    password: Optional[str] = None

    @property
    def complete(self) -> bool:
        return self.username is not None and self.password is not None


class BackendEndpoint(BaseModel):
    """Network location and credentials of one search core."""

    model_config = ConfigDict(frozen=True)

    base_uri: str
    credentials: Optional[Credentials] = None

    @field_validator("base_uri")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if not v:
            raise ValueError("Endpoint base URI cannot be empty")
        return v

    def basic_auth_header(self) -> Optional[str]:
        """Return the Authorization header value, or None without full credentials."""
        if self.credentials is None or not self.credentials.complete:
            return None
        token = f"{self.credentials.username}:{self.credentials.password}".encode("utf-8")
        return "Basic " + base64.b64encode(token).decode("ascii")
