from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, SecretStr

DEFAULT_BASE_URL = "https://www.coinspot.com.au"


class ClientConfig(BaseModel):
    base_url: str = DEFAULT_BASE_URL
    auth_key: str | None = None
    auth_secret: SecretStr | None = None
    timeout: float = Field(default=10.0, gt=0)
    proxy: str | None = None

    model_config = {"extra": "forbid", "frozen": True}

    @property
    def has_credentials(self) -> bool:
        if not self.auth_key or self.auth_secret is None:
            return False
        return bool(self.auth_secret.get_secret_value())


class Settings(BaseModel):
    env: str = "dev"
    coinspot: ClientConfig = Field(default_factory=ClientConfig)

    model_config = {"extra": "forbid"}

    def redacted(self) -> dict[str, Any]:
        data = self.model_dump(mode="json")
        client = data.get("coinspot")
        if isinstance(client, dict):
            if client.get("auth_key") is not None:
                client["auth_key"] = "***"
            if client.get("auth_secret") is not None:
                client["auth_secret"] = "***"
        return data
