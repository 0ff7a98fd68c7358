"""Application settings loaded from environment variables and config files.

Configuration is loaded from (highest priority first):
1. Environment variables (prefix: ``NWCFAUCET_``, nested via ``__``;
   the hub block also reads ``ALBY_HUB_*``)
2. YAML config file (``NWCFAUCET_CONFIG_PATH`` env var)
3. Defaults defined here

The resulting :class:`AppConfig` is built once at process start and passed
explicitly into the engine; request handling never reads the environment.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Self

import yaml
from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# ---------------------------------------------------------------------------
# Sub-config models
# ---------------------------------------------------------------------------


class ServerConfig(BaseSettings):
    """HTTP server settings."""

    model_config = SettingsConfigDict(
        env_prefix="NWCFAUCET_SERVER__",
        case_sensitive=False,
    )

    host: str = "0.0.0.0"  # noqa: S104
    port: int = 3000


class HubConfig(BaseSettings):
    """Alby Hub connection settings.

    ``url`` must point at the operator's Alby Hub instance (not
    api.getalby.com). It is validated when the hub client is built.
    The token and pubkey also accept the older ``AUTH_TOKEN`` and
    ``NWC_PUBKEY`` names; the ``ALBY_HUB_`` names win when both are set.
    """

    model_config = SettingsConfigDict(
        env_prefix="ALBY_HUB_",
        case_sensitive=False,
        populate_by_name=True,
    )

    url: str = ""
    auth_token: str = Field(
        default="",
        validation_alias=AliasChoices("ALBY_HUB_AUTH_TOKEN", "AUTH_TOKEN"),
    )
    name: str = ""
    region: str = ""
    pubkey: str = Field(
        default="",
        validation_alias=AliasChoices("ALBY_HUB_PUBKEY", "NWC_PUBKEY"),
        description="Optional NWC client pubkey sent with app creation",
    )
    timeout: float = 30.0


class LnurlConfig(BaseSettings):
    """Outgoing LNURL-pay client settings."""

    model_config = SettingsConfigDict(
        env_prefix="NWCFAUCET_LNURL__",
        case_sensitive=False,
    )

    timeout: float = 30.0
    user_agent: str = "nwc-faucet/1.0"


class FaucetConfig(BaseSettings):
    """Wallet provisioning and payment behaviour."""

    model_config = SettingsConfigDict(
        env_prefix="NWCFAUCET_FAUCET__",
        case_sensitive=False,
    )

    app_name_prefix: str = "nwc"
    lightning_address_domain: str = "getalby.com"
    app_store_app_id: str = "nwc-faucet"
    budget_renewal: str = "monthly"
    default_pay_amount_sat: int = Field(default=1000, ge=1)
    top_up_own_addresses: bool = True
    unique_app_names: bool = Field(
        default=False,
        description="Append a random hex suffix to generated app names",
    )


class MetricsConfig(BaseSettings):
    """Prometheus metrics settings."""

    model_config = SettingsConfigDict(
        env_prefix="NWCFAUCET_METRICS__",
        case_sensitive=False,
    )

    enabled: bool = True


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------


def _load_yaml(path: str | Path) -> dict[str, Any]:
    """Load a YAML configuration file and return its contents as a dict.

    Returns an empty dict if the file doesn't exist or is empty.
    """
    p = Path(path)
    if not p.exists():
        return {}
    text = p.read_text(encoding="utf-8")
    data = yaml.safe_load(text)
    return data if isinstance(data, dict) else {}


class AppConfig(BaseSettings):
    """Top-level application configuration."""

    model_config = SettingsConfigDict(
        env_prefix="NWCFAUCET_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    debug: bool = False
    config_path: str = ""

    server: ServerConfig = Field(default_factory=ServerConfig)
    hub: HubConfig = Field(default_factory=HubConfig)
    lnurl: LnurlConfig = Field(default_factory=LnurlConfig)
    faucet: FaucetConfig = Field(default_factory=FaucetConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)

    @model_validator(mode="before")
    @classmethod
    def _merge_yaml(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Merge YAML config file contents under the env var overrides."""
        config_path = values.get("config_path", "")
        if not config_path:
            return values
        yaml_data = _load_yaml(config_path)
        for key, val in yaml_data.items():
            if key not in values or values[key] is None:
                values[key] = val
            elif isinstance(val, dict) and isinstance(values.get(key), dict):
                values[key] = {**val, **values[key]}
        return values

    @classmethod
    def from_yaml(cls, path: str | Path) -> Self:
        """Construct ``AppConfig`` loading defaults from a YAML file.

        Environment variables still override YAML values.
        """
        return cls(config_path=str(path))
