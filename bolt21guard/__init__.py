from .amount import MAX_SATS, parse_amount, parse_amount_result, parse_user_amount
from .dispatch import DispatchError, PaymentDispatcher
from .execution_queue import ExecutionQueue
from .models import (
    AmountResult,
    DispatchResult,
    ErrorKind,
    PaymentType,
    RiskDecision,
    UrlRejection,
    UrlVerdict,
    ValidationOutcome,
)
from .price import PriceGuard
from .remediation import describe
from .responses import (
    ChannelBalance,
    CommunityNodeStatus,
    CommunityPaymentResult,
    NodeBalance,
    parse_json_object,
)
from .session import WalletSession
from .store import RiskStateCorrupted, RiskStateStore
from .tracker import PaymentRiskTracker
from .url_admission import admit
from .validator import classify, sanitize_memo, validate, validate_qr_code

__all__ = [
    "MAX_SATS",
    "AmountResult",
    "ChannelBalance",
    "CommunityNodeStatus",
    "CommunityPaymentResult",
    "DispatchError",
    "DispatchResult",
    "ErrorKind",
    "ExecutionQueue",
    "NodeBalance",
    "PaymentDispatcher",
    "PaymentRiskTracker",
    "PaymentType",
    "PriceGuard",
    "RiskDecision",
    "RiskStateCorrupted",
    "RiskStateStore",
    "UrlRejection",
    "UrlVerdict",
    "ValidationOutcome",
    "WalletSession",
    "admit",
    "classify",
    "describe",
    "parse_amount",
    "parse_amount_result",
    "parse_json_object",
    "parse_user_amount",
    "sanitize_memo",
    "validate",
    "validate_qr_code",
]
