from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, SecretStr


class ProxySettings(BaseModel):
    enabled: bool = False
    url: str | None = None
    username: str | None = None
    password: SecretStr | None = None

    model_config = {"extra": "forbid"}


class HttpSettings(BaseModel):
    timeout: float = Field(default=30.0, gt=0)
    user_agent: str = "coinfeed/1.0"

    model_config = {"extra": "forbid"}


class DriverSettings(BaseModel):
    enabled: bool = True
    markets: list[str] | None = None
    options: dict[str, Any] = Field(default_factory=dict)

    # newer config files may carry keys this version does not know
    model_config = {"extra": "ignore"}


class Settings(BaseModel):
    env: str = "dev"
    proxy: ProxySettings = Field(default_factory=ProxySettings)
    http: HttpSettings = Field(default_factory=HttpSettings)
    drivers: dict[str, DriverSettings] = Field(default_factory=dict)

    model_config = {"extra": "forbid"}

    def redacted(self) -> dict[str, Any]:
        data = self.model_dump(mode="json")
        proxy = data.get("proxy")
        if isinstance(proxy, dict) and proxy.get("password") is not None:
            proxy["password"] = "***"
        return data
