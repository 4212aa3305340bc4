"""Ledger Store for MarcoLand.

Reads and guarded writes of player resource balances. Every write is a single
conditional ``UPDATE`` whose ``WHERE`` clause carries the guard, so the check
and the mutation cannot be separated by another transaction.
"""

from collections.abc import Mapping

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from marcoland.domain.enums import Resource
from marcoland.domain.trade_data import Balance
from marcoland.errors import (
    InsufficientFunds,
    InsufficientQuantity,
    InvalidRange,
    PlayerNotFound,
    StoreUnavailable,
)
from marcoland.models import Player

# Largest balance a BIGINT ledger column holds
BALANCE_CEILING = 2**63 - 1

_COLUMNS = {
    Resource.GOLD: Player.gold,
    Resource.GEMS: Player.gems,
    Resource.METALS: Player.metals,
    Resource.QUARTZ: Player.quartz,
}


class LedgerStore:
    """Session-scoped access to player ledgers."""

    def __init__(self, session: Session):
        self.session = session

    def get_balance(self, player_id: str) -> Balance:
        """Return the player's balances straight from the store.

        Raises:
            PlayerNotFound: If the player does not exist
        """
        row = self.session.execute(
            select(Player.gold, Player.gems, Player.metals, Player.quartz).where(
                Player.id == player_id
            )
        ).one_or_none()
        if row is None:
            raise PlayerNotFound(player_id=player_id)
        return Balance(gold=row.gold, gems=row.gems, metals=row.metals, quartz=row.quartz)

    def lock(self, *player_ids: str) -> dict[str, Player]:
        """Lock player rows one at a time in ascending id order.

        A fixed acquisition order keeps two cross-player trades running in
        opposite directions from deadlocking.

        Args:
            *player_ids: Players to lock; duplicates are ignored

        Returns:
            Locked players keyed by id

        Raises:
            PlayerNotFound: If any player does not exist
        """
        locked: dict[str, Player] = {}
        for player_id in sorted(set(player_ids)):
            player = self.session.execute(
                select(Player)
                .where(Player.id == player_id)
                .with_for_update()
                .execution_options(populate_existing=True)
            ).scalar_one_or_none()
            if player is None:
                raise PlayerNotFound(player_id=player_id)
            locked[player_id] = player
        return locked

    def apply_delta(
        self,
        player_id: str,
        deltas: Mapping[Resource, int],
        guard: Mapping[Resource, int] | None = None,
    ) -> Balance:
        """Apply signed resource deltas under a precondition.

        Args:
            player_id: Ledger to change
            deltas: Resource to signed amount
            guard: Resource to minimum balance required before the change

        Returns:
            Balances after the change

        Raises:
            InsufficientFunds: If gold is short
            InsufficientQuantity: If another resource is short
            InvalidRange: If a credit would push a balance past BALANCE_CEILING
            PlayerNotFound: If the player does not exist
        """
        changes = {Resource(resource): int(amount) for resource, amount in deltas.items() if amount}
        minimums = {Resource(resource): int(amount) for resource, amount in (guard or {}).items()}

        if not changes:
            balance = self.get_balance(player_id)
            self._raise_if_short(balance, changes, minimums)
            return balance

        conditions = [Player.id == player_id]
        values = {}
        for resource, amount in changes.items():
            column = _COLUMNS[resource]
            values[column.key] = column + amount
            if amount < 0:
                conditions.append(column >= -amount)
            else:
                conditions.append(column <= BALANCE_CEILING - amount)
        for resource, minimum in minimums.items():
            conditions.append(_COLUMNS[resource] >= minimum)

        result = self.session.execute(
            update(Player)
            .where(*conditions)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            # Nothing was written; work out which precondition failed.
            balance = self.get_balance(player_id)
            self._raise_if_short(balance, changes, minimums)
            self._raise_if_overflow(balance, changes)
            raise StoreUnavailable("ledger row changed during the update", player_id=player_id)

        self._expire_cached(player_id)
        return self.get_balance(player_id)

    def _expire_cached(self, player_id: str) -> None:
        key = self.session.identity_key(Player, player_id)
        cached = self.session.identity_map.get(key)
        if cached is not None:
            self.session.expire(cached)

    @staticmethod
    def _raise_if_short(
        balance: Balance,
        changes: Mapping[Resource, int],
        minimums: Mapping[Resource, int],
    ) -> None:
        for resource in Resource:
            available = balance.get(resource)
            required = max(minimums.get(resource, 0), -changes.get(resource, 0))
            if available < required:
                if resource is Resource.GOLD:
                    raise InsufficientFunds(
                        f"Insufficient gold: {available} < {required}",
                        required=required,
                        available=available,
                    )
                raise InsufficientQuantity(
                    f"Insufficient {resource.value}: {available} < {required}",
                    resource=resource.value,
                    required=required,
                    available=available,
                )

    @staticmethod
    def _raise_if_overflow(balance: Balance, changes: Mapping[Resource, int]) -> None:
        for resource, amount in changes.items():
            if amount > 0 and balance.get(resource) > BALANCE_CEILING - amount:
                raise InvalidRange(
                    f"{resource.value.capitalize()} balance cannot exceed {BALANCE_CEILING}",
                    resource=resource.value,
                    available=balance.get(resource),
                    credit=amount,
                )
