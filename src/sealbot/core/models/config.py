"""Configuration models using Pydantic."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from sealbot.core.models.workflow import WorkflowKind

SUI_TESTNET_RPC_URL = "https://fullnode.testnet.sui.io:443"
DEFAULT_SEAL_PACKAGE_ID = "0x4cb081457b1e098d566a277f605ba48410e26e66eaab5b3be4f6c560e9501800"
DEFAULT_PUBLISHER_URLS = [
    f"https://seal-example.vercel.app/publisher{n}/v1/blobs" for n in range(1, 7)
]
DEFAULT_IMAGE_URL = "https://picsum.photos/seed/sui-seal-bot/800/600"
LOCAL_IMAGE_PATH = "image.jpg"


class ChainConfig(BaseModel):
    """Sui network configuration."""

    rpc_url: str = SUI_TESTNET_RPC_URL
    package_id: str = DEFAULT_SEAL_PACKAGE_ID
    gas_budget: int = Field(default=10_000_000, ge=1)  # 0.01 SUI
    request_timeout: float = Field(default=60.0, gt=0)


class PublisherConfig(BaseModel):
    """Blob publisher configuration."""

    urls: Annotated[list[str], NoDecode] = Field(default_factory=lambda: list(DEFAULT_PUBLISHER_URLS))
    epochs: int = Field(default=1, ge=1)
    max_retries: int = Field(default=5, ge=1, le=50)
    retry_delay: float = Field(default=3.0, gt=0)
    retry_multiplier: float = Field(default=2.0, ge=1.0)
    retry_delay_max: float = Field(default=30.0, gt=0)
    request_timeout: float = Field(default=30.0, gt=0)

    @field_validator("urls", mode="before")
    @classmethod
    def split_urls(cls, value: Any) -> Any:
        """Accept a comma-separated string as well as a list."""
        if isinstance(value, str):
            return [url.strip() for url in value.split(",") if url.strip()]
        return value

    @model_validator(mode="after")
    def check_delay_bounds(self) -> PublisherConfig:
        if self.retry_delay_max < self.retry_delay:
            raise ValueError("retry_delay_max must not be lower than retry_delay")
        return self


class WorkflowConfig(BaseModel):
    """Workflow selection and parameters."""

    kind: WorkflowKind = WorkflowKind.ALLOWLIST
    repetitions: int = Field(default=1, ge=1)
    repeat_delay: float = Field(default=10.0, ge=0)
    content_source: str = DEFAULT_IMAGE_URL
    additional_addresses: Annotated[list[str], NoDecode] = []
    subscription_amount: int = Field(default=10, ge=0)
    subscription_duration: int = Field(default=60_000_000, ge=1)

    @field_validator("additional_addresses", mode="before")
    @classmethod
    def split_addresses(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [addr.strip() for addr in value.split(",") if addr.strip()]
        return value


class FilesConfig(BaseModel):
    """Input file locations."""

    wallets: Path = Path("wallets.txt")
    proxies: Path = Path("proxies.txt")


class LogConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    structured: bool = False
    file: Path | None = None
    history_size: int = Field(default=1000, ge=1)


class Config(BaseSettings):
    """Main application configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SEALBOT_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )

    chain: ChainConfig = Field(default_factory=ChainConfig)
    publisher: PublisherConfig = Field(default_factory=PublisherConfig)
    workflow: WorkflowConfig = Field(default_factory=WorkflowConfig)
    files: FilesConfig = Field(default_factory=FilesConfig)
    log: LogConfig = Field(default_factory=LogConfig)

    @classmethod
    def from_yaml(cls, path: Path | str) -> Config:
        """Load configuration from YAML file."""
        import yaml

        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with path.open() as f:
            data = yaml.safe_load(f)

        return cls(**data) if data else cls()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return self.model_dump(mode="json")

    def to_yaml(self, path: Path | str) -> None:
        """Save configuration to YAML file."""
        import yaml

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with path.open("w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False)

    def merge(self, overrides: dict[str, Any]) -> Config:
        """Return a new config with the (nested) overrides applied."""

        def deep_merge(base: dict, override: dict) -> dict:
            result = base.copy()
            for key, value in override.items():
                if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                    result[key] = deep_merge(result[key], value)
                else:
                    result[key] = value
            return result

        return Config(**deep_merge(self.to_dict(), overrides))
