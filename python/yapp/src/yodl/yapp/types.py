"""
Type definitions for the guest/host messaging protocol
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

# Request kinds (guest -> host)
PAYMENT_REQUEST = "PAYMENT_REQUEST"
USER_CONTEXT_REQUEST = "USER_CONTEXT_REQUEST"
SIWE_REQUEST = "SIWE_REQUEST"
SAVE_COOKIES_REQUEST = "SAVE_COOKIES_REQUEST"
GET_COOKIES_REQUEST = "GET_COOKIES_REQUEST"
CLOSE = "CLOSE"

# Response kinds (host -> guest)
PAYMENT_SUCCESS = "PAYMENT_SUCCESS"
PAYMENT_CANCELLED = "PAYMENT_CANCELLED"
RECIPIENT_NOT_FOUND = "RECIPIENT_NOT_FOUND"
USER_CONTEXT_RESPONSE = "USER_CONTEXT_RESPONSE"
SIWE_RESPONSE = "SIWE_RESPONSE"
SAVE_COOKIES_RESPONSE = "SAVE_COOKIES_RESPONSE"
GET_COOKIES_RESPONSE = "GET_COOKIES_RESPONSE"

# Outcome kinds that race for a single payment request
PAYMENT_OUTCOME_KINDS = (PAYMENT_SUCCESS, PAYMENT_CANCELLED, RECIPIENT_NOT_FOUND)


class FiatCurrency(str, Enum):
    """Supported fiat currencies for payments"""

    EUR = "EUR"
    USD = "USD"
    GBP = "GBP"
    JPY = "JPY"
    CNY = "CNY"
    KRW = "KRW"
    INR = "INR"
    RUB = "RUB"
    TRY = "TRY"
    BRL = "BRL"
    CAD = "CAD"
    AUD = "AUD"
    NZD = "NZD"
    CHF = "CHF"
    ILS = "ILS"
    MXN = "MXN"
    IDR = "IDR"
    THB = "THB"
    VND = "VND"
    SGD = "SGD"
    PHP = "PHP"
    PLN = "PLN"
    SEK = "SEK"


class Message(BaseModel):
    """Envelope for every cross-window message"""

    kind: str
    payload: Any = None


class PaymentRequestPayload(BaseModel):
    """Payment intent carried to the host"""

    address_or_ens: str = Field(alias="addressOrEns")
    amount: Optional[float] = None
    currency: Optional[str] = None
    memo: Optional[str] = None

    class Config:
        populate_by_name = True

    @field_validator("currency", mode="before")
    @classmethod
    def unwrap_currency(cls, v: Any) -> Any:
        if isinstance(v, Enum):
            return v.value
        return v


class PaymentRequest(PaymentRequestPayload):
    """Payment intent as submitted by the guest"""

    redirect_url: Optional[str] = Field(None, alias="redirectUrl")

    def to_payload(self) -> PaymentRequestPayload:
        return PaymentRequestPayload(
            addressOrEns=self.address_or_ens,
            amount=self.amount,
            currency=self.currency,
            memo=self.memo,
        )


class PaymentResult(BaseModel):
    """Confirmed payment returned by the host"""

    tx_hash: str = Field(alias="txHash")
    chain_id: int = Field(alias="chainId")

    class Config:
        populate_by_name = True


class RecipientNotFound(BaseModel):
    """Payload of RECIPIENT_NOT_FOUND"""

    name: Optional[str] = None


class Community(BaseModel):
    """Community the user is acting in"""

    address: str
    ens_name: str = Field(alias="ensName")
    user_ens_name: str = Field(alias="userEnsName")

    class Config:
        populate_by_name = True


class UserContext(BaseModel):
    """Identity of the user as known to the host"""

    address: str
    primary_ens_name: Optional[str] = Field(None, alias="primaryEnsName")
    community: Optional[Community] = None

    class Config:
        populate_by_name = True


class SiweRequest(BaseModel):
    """Sign-In with Ethereum message fields"""

    domain: str
    uri: str
    version: str = "1"
    chain_id: int = Field(alias="chainId")
    nonce: str
    statement: Optional[str] = None
    issued_at: Optional[str] = Field(None, alias="issuedAt")
    expiration_time: Optional[str] = Field(None, alias="expirationTime")

    class Config:
        populate_by_name = True


class SiweResponse(BaseModel):
    """Signature produced by the host wallet"""

    address: str
    signature: str


class CookieData(BaseModel):
    """Cookie value with expiry (epoch milliseconds)"""

    value: Any = None
    exp: Optional[int] = None


class Cookie(BaseModel):
    """Yapp cookie stored by the host"""

    key: str
    data: CookieData


class TokenClaims(BaseModel):
    """Claims of a host-issued identity token"""

    iss: Optional[str] = None
    sub: Optional[str] = None
    aud: Optional[str | list[str]] = None
    iat: Optional[int] = None
    exp: Optional[int] = None
    # Yapp claims: address, primary ENS, community ENS, community, yapp
    a: Optional[str] = None
    p: Optional[str] = None
    e: Optional[str] = None
    c: Optional[str] = None
    y: Optional[str] = None

    class Config:
        extra = "allow"
