"""Ledger Store Protocol Interface."""

from collections.abc import Mapping
from typing import Protocol

from marcoland.domain.enums import Resource
from marcoland.domain.trade_data import Balance
from marcoland.models import Player


class ILedgerStore(Protocol):
    """Protocol for reading and mutating player resource balances.

    Implementations apply every change inside the caller's transaction; they
    never commit on their own.
    """

    def get_balance(self, player_id: str) -> Balance:
        """Return the player's current balances.

        Raises:
            PlayerNotFound: If the player does not exist
        """
        ...

    def lock(self, *player_ids: str) -> dict[str, Player]:
        """Acquire exclusive row locks on the players, ascending by id.

        Raises:
            PlayerNotFound: If any player does not exist
        """
        ...

    def apply_delta(
        self,
        player_id: str,
        deltas: Mapping[Resource, int],
        guard: Mapping[Resource, int] | None = None,
    ) -> Balance:
        """Add signed ``deltas`` when every ``guard`` minimum holds.

        Returns:
            The balances after the change

        Raises:
            InsufficientFunds: If gold would go negative or is below its guard
            InsufficientQuantity: If another resource would go negative or
                is below its guard
            PlayerNotFound: If the player does not exist
        """
        ...
