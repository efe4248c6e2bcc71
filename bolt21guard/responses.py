"""
Parsing of remote node API bodies. Every numeric field goes through
parse_amount, text fields through the string validator, so a hostile or
broken node can't push negative, oversized or display-spoofing values into
wallet state.
"""

import json
from typing import Any, Dict, Optional

from loguru import logger
from pydantic import BaseModel

from .amount import parse_amount
from .validator import validate


def parse_json_object(body: Any) -> Optional[Dict[str, Any]]:
    """
    Decode a response body, None unless it is a JSON object.
    """
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            logger.warning("responses: body is not utf-8")
            return None
    if not isinstance(body, str):
        return None
    try:
        data = json.loads(body)
    except ValueError:
        logger.warning("responses: malformed json body")
        return None
    if not isinstance(data, dict):
        logger.warning("responses: json body is not an object")
        return None
    return data


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    outcome = validate(str(value))
    if not outcome.accepted:
        return None
    return outcome.sanitized


def _nested(data: Dict[str, Any], key: str, field: str) -> Any:
    inner = data.get(key)
    if not isinstance(inner, dict):
        return None
    return inner.get(field)


class CommunityNodeStatus(BaseModel):
    online: bool = False
    alias: Optional[str] = None
    channels: int = 0
    spendable: int = 0
    receivable: int = 0
    fee_rate_ppm: int = 0

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "CommunityNodeStatus":
        return cls(
            online=data.get("online") is True,
            alias=_text(data.get("alias")),
            channels=parse_amount(data.get("channels")),
            spendable=parse_amount(data.get("spendable")),
            receivable=parse_amount(data.get("receivable")),
            fee_rate_ppm=parse_amount(data.get("feeRatePpm")),
        )


class CommunityPaymentResult(BaseModel):
    success: bool
    payment_hash: Optional[str] = None
    fee_sat: int = 0
    amount_sat: int = 0
    error: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any], status_code: int = 200) -> "CommunityPaymentResult":
        if status_code == 200 and data.get("success") is True:
            return cls(
                success=True,
                payment_hash=_text(data.get("paymentHash")),
                fee_sat=parse_amount(data.get("feeSat")),
                amount_sat=parse_amount(data.get("amountSat")),
            )
        return cls(success=False, error=_text(data.get("error")) or "Unknown error")


class NodeBalance(BaseModel):
    confirmed: int = 0
    unconfirmed: int = 0
    total: int = 0

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "NodeBalance":
        return cls(
            confirmed=parse_amount(data.get("confirmed_balance")),
            unconfirmed=parse_amount(data.get("unconfirmed_balance")),
            total=parse_amount(data.get("total_balance")),
        )


class ChannelBalance(BaseModel):
    local: int = 0
    remote: int = 0
    pending: int = 0

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "ChannelBalance":
        return cls(
            local=parse_amount(_nested(data, "local_balance", "sat")),
            remote=parse_amount(_nested(data, "remote_balance", "sat")),
            pending=parse_amount(_nested(data, "pending_open_local_balance", "sat")),
        )
