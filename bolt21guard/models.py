# Data models shared by the validators, the risk tracker and the dispatcher

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, model_validator


class ErrorKind(str, Enum):
    DANGEROUS_UNICODE = "dangerous_unicode"
    NON_ASCII = "non_ascii"
    TOO_LONG = "too_long"


class UrlRejection(str, Enum):
    BAD_FORMAT = "bad_format"
    WRONG_SCHEME = "wrong_scheme"
    PRIVATE_NETWORK_BLOCKED = "private_network_blocked"
    INVALID_DOMAIN = "invalid_domain"


class PaymentType(str, Enum):
    BOLT11_INVOICE = "bolt11_invoice"
    BOLT12_OFFER = "bolt12_offer"
    ON_CHAIN_ADDRESS = "on_chain_address"
    UNKNOWN = "unknown"


class ValidationOutcome(BaseModel):
    """
    Result of validating an untrusted string.
    Either accepted with the sanitized value, or rejected with a reason.
    """

    model_config = ConfigDict(frozen=True)

    accepted: bool
    sanitized: Optional[str] = None
    reason: Optional[ErrorKind] = None

    @model_validator(mode="after")
    def _one_of(self) -> "ValidationOutcome":
        if self.accepted and (self.sanitized is None or self.reason is not None):
            raise ValueError("accepted outcome needs a sanitized value and no reason")
        if not self.accepted and (self.reason is None or self.sanitized is not None):
            raise ValueError("rejected outcome needs a reason and no value")
        return self

    @classmethod
    def accept(cls, sanitized: str) -> "ValidationOutcome":
        return cls(accepted=True, sanitized=sanitized)

    @classmethod
    def reject(cls, reason: ErrorKind) -> "ValidationOutcome":
        return cls(accepted=False, reason=reason)


class UrlVerdict(BaseModel):
    model_config = ConfigDict(frozen=True)

    accepted: bool
    url: Optional[str] = None
    reason: Optional[UrlRejection] = None

    @model_validator(mode="after")
    def _one_of(self) -> "UrlVerdict":
        if self.accepted and (self.url is None or self.reason is not None):
            raise ValueError("accepted verdict needs a url and no reason")
        if not self.accepted and (self.reason is None or self.url is not None):
            raise ValueError("rejected verdict needs a reason and no url")
        return self

    @classmethod
    def accept(cls, url: str) -> "UrlVerdict":
        return cls(accepted=True, url=url)

    @classmethod
    def reject(cls, reason: UrlRejection) -> "UrlVerdict":
        return cls(accepted=False, reason=reason)


class AmountResult(BaseModel):
    # defaulted is True when the input was unusable and `amount` is the default
    model_config = ConfigDict(frozen=True)

    amount: int
    defaulted: bool = False
    clamped: bool = False


class PaymentRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    amount_sats: int
    observed_at: float


class RiskDecision(BaseModel):
    model_config = ConfigDict(frozen=True)

    requires_step_up: bool
    short_window_total: int
    daily_total: int
    # which ceiling fired: "short_window", "daily" or None
    trigger: Optional[str] = None


class RiskSnapshot(BaseModel):
    """
    Persisted form of the tracker state. Owned by this package only,
    the version is bumped whenever the layout changes.
    """

    version: int = 1
    records: List[PaymentRecord] = []
    day: Optional[str] = None
    daily_total: int = 0


class DispatchResult(BaseModel):
    ok: bool
    amount_sats: int = 0
    payment_type: Optional[PaymentType] = None
    decision: Optional[RiskDecision] = None
    stepped_up: bool = False
    payment: Optional[Dict] = None
    error: Optional[Dict[str, str]] = None
