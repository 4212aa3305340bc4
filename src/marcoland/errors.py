"""Error taxonomy for the economy engine.

Three families are distinguished:

* validation errors (``InvalidRequest``, ``InvalidRange``), raised before the
  store is touched;
* business-rule errors (``BusinessRuleError`` subclasses), raised from inside a
  unit of work which is then rolled back;
* transient infrastructure errors (``StoreUnavailable``), safe to retry.

Every error carries a stable ``code`` that the HTTP layer returns verbatim so
clients can branch on it.
"""

from __future__ import annotations


class EconomyError(Exception):
    """Base class for every error surfaced by the economy engine."""

    code: str = "economy_error"
    status_code: int = 400
    default_message: str = "Economy operation failed"

    def __init__(self, message: str | None = None, **details: object) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {"error": self.message, "code": self.code}
        if self.details:
            payload["details"] = self.details
        return payload


class InvalidRequest(EconomyError, ValueError):
    code = "invalid_request"
    default_message = "Malformed request"


class InvalidRange(InvalidRequest):
    code = "invalid_range"
    default_message = "Value out of range"


class BusinessRuleError(EconomyError, ValueError):
    """An expected rule violation; never leaves partial state behind."""


class PlayerNotFound(BusinessRuleError):
    code = "player_not_found"
    status_code = 404
    default_message = "Player character not found"


class InsufficientFunds(BusinessRuleError):
    code = "insufficient_funds"
    default_message = "Insufficient gold"


class InsufficientQuantity(BusinessRuleError):
    code = "insufficient_quantity"
    default_message = "Insufficient resources"


class EquipmentNotFound(BusinessRuleError):
    code = "not_found"
    status_code = 404
    default_message = "Equipment not found"


class ItemNotFound(BusinessRuleError):
    code = "item_not_found"
    status_code = 404
    default_message = "Item not found in inventory"


class SlotMismatch(BusinessRuleError):
    code = "slot_mismatch"
    default_message = "Item cannot be equipped in that slot"


class StrengthRequirement(BusinessRuleError):
    code = "strength_requirement"
    default_message = "Not strong enough to equip this item"


class ListingNotFound(BusinessRuleError):
    code = "listing_not_found"
    status_code = 404
    default_message = "Listing not found"


class ListingNotActive(BusinessRuleError):
    code = "listing_not_active"
    status_code = 409
    default_message = "Listing is no longer active"


class NotOwner(BusinessRuleError):
    code = "not_owner"
    status_code = 403
    default_message = "Only the seller can cancel this listing"


class SelfTrade(BusinessRuleError):
    code = "self_trade"
    default_message = "Cannot buy your own listing"


class DailyLimitExceeded(BusinessRuleError):
    code = "daily_limit_exceeded"
    default_message = "Daily purchase limit exceeded"


class StoreUnavailable(EconomyError, RuntimeError):
    """The store could not complete the unit of work; nothing was applied."""

    code = "store_unavailable"
    status_code = 503
    default_message = "Ledger store temporarily unavailable, please retry"


class Unauthenticated(EconomyError):
    code = "unauthenticated"
    status_code = 401
    default_message = "Not authenticated"
