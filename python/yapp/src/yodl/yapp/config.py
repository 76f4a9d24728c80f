"""
Yapp protocol configuration
Centralized constants and per-instance settings
"""

import os
from typing import Dict, Literal, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from yodl.yapp.exceptions import ConfigurationError
from yodl.yapp.transport import TransportMode

TimeoutProfile = Literal["production", "test"]


class ProtocolConfig:
    """Protocol constants shared by both transports"""

    DEFAULT_ORIGIN = "https://yodl.me"

    # Timeouts (milliseconds)
    PAYMENT_TIMEOUT_MS = 300_000  # 5 minutes
    TEST_TIMEOUT_MS = 1_000
    USER_CONTEXT_TIMEOUT_MS = 5_000

    TIMEOUTS: Dict[str, int] = {
        "production": PAYMENT_TIMEOUT_MS,
        "test": TEST_TIMEOUT_MS,
    }

    MAX_MEMO_BYTES = 32
    COOKIE_DEFAULT_EXPIRY_MS = 7 * 24 * 60 * 60 * 1000  # 7 days

    # Session storage slot for the pending redirect payment
    STORAGE_KEY = "yodl_payment_request"
    RECORD_SCHEMA_VERSION = 1

    # URL parameters
    PARAM_MEMO = "memo"
    PARAM_STATUS = "status"
    PARAM_TX_HASH = "txHash"
    PARAM_CHAIN_ID = "chainId"
    PARAM_REDIRECT_URL = "redirectUrl"
    PARAM_AMOUNT = "amount"
    PARAM_CURRENCY = "currency"
    STATUS_CANCELLED = "cancelled"

    RETURN_PARAMS = (PARAM_MEMO, PARAM_STATUS, PARAM_TX_HASH, PARAM_CHAIN_ID)

    @classmethod
    def get_timeout_ms(cls, profile: str) -> int:
        """Get the request timeout for a profile

        Args:
            profile: "production" or "test"

        Returns:
            Timeout in milliseconds

        Raises:
            ConfigurationError: If the profile is unknown
        """
        timeout = cls.TIMEOUTS.get(profile)
        if timeout is None:
            raise ConfigurationError(f"Unknown timeout profile: {profile}")
        return timeout


class YappConfig(BaseModel):
    """Settings for one guest/host pairing"""

    origin: str = ProtocolConfig.DEFAULT_ORIGIN
    ens_name: str
    timeout_profile: TimeoutProfile = "production"
    payment_timeout_ms: Optional[int] = Field(None, gt=0)
    user_context_timeout_ms: int = Field(ProtocolConfig.USER_CONTEXT_TIMEOUT_MS, gt=0)
    transport_mode: Optional[TransportMode] = None

    @field_validator("ens_name")
    @classmethod
    def validate_ens_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("ensName is required")
        return v

    @property
    def request_timeout_ms(self) -> int:
        """Effective timeout for payment, SIWE and cookie requests"""
        if self.payment_timeout_ms is not None:
            return self.payment_timeout_ms
        return ProtocolConfig.get_timeout_ms(self.timeout_profile)

    @classmethod
    def from_env(cls) -> "YappConfig":
        """Build settings from YAPP_* environment variables."""
        ens_name = os.environ.get("YAPP_ENS_NAME")
        if not ens_name:
            raise ConfigurationError("YAPP_ENS_NAME is required")

        timeout = os.environ.get("YAPP_PAYMENT_TIMEOUT_MS")
        try:
            payment_timeout_ms = int(timeout) if timeout else None
        except ValueError:
            raise ConfigurationError(f"YAPP_PAYMENT_TIMEOUT_MS must be an integer, got {timeout!r}")

        try:
            return cls(
                origin=os.environ.get("YAPP_ORIGIN", ProtocolConfig.DEFAULT_ORIGIN),
                ens_name=ens_name,
                timeout_profile=os.environ.get("YAPP_TIMEOUT_PROFILE", "production"),
                payment_timeout_ms=payment_timeout_ms,
            )
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid YAPP_* settings: {e}") from e
