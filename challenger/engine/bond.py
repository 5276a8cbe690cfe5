import logging
from typing import Dict

from eth_utils import from_wei

from challenger.core.events import ChallengerEvent, emit
from challenger.net.ledger import LedgerQueryAdapter
from challenger.utils.errors import BondUnavailable, QueryFailure


class BondResolver:
    """Looks up the challenger bond for a game type through its implementation contract.

    Bonds are cached per game type for the lifetime of the resolver.
    """

    def __init__(self, ledger: LedgerQueryAdapter):
        self.ledger = ledger
        self._cache: Dict[int, int] = {}

    def _unavailable(self, game_type: int, msg: str) -> BondUnavailable:
        emit(ChallengerEvent.BOND_UNAVAILABLE, msg, level=logging.ERROR, game_type=game_type)
        return BondUnavailable(msg, game_type)

    async def bond_for(self, game_type: int) -> int:
        if game_type in self._cache:
            return self._cache[game_type]

        try:
            implementation = await self.ledger.implementation_for(game_type)
            if implementation is None:
                raise self._unavailable(game_type, f"No game implementation found for game type {game_type}")
            bond = await self.ledger.challenger_bond_of(implementation)
        except QueryFailure as e:
            raise self._unavailable(game_type, f"Failed to get challenger bond: {e}") from e

        if not bond:
            raise self._unavailable(
                game_type, f"Failed to get challenger bond from implementation {implementation}"
            )

        emit(
            ChallengerEvent.BOND_RESOLVED,
            f"Challenger bond: {from_wei(bond, 'ether')} ETH",
            game_type=game_type,
            implementation=implementation,
            bond=bond,
        )
        self._cache[game_type] = bond
        return bond
