"""Contract transaction records and the store they are kept in."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Protocol

from .config import LEAGUE_TZ
from .contract_validation import validate_contract_submission
from .models import ContractValidationError


@dataclass
class ContractTransaction:
    id: str
    league_id: str
    franchise_id: str
    player_id: str
    old_contract_years: int
    new_contract_years: int
    submitted_at: datetime
    status: str = "pending"  # pending | rejected
    errors: List[ContractValidationError] = field(default_factory=list)


class ContractTransactionStore(Protocol):
    def add(self, transaction: ContractTransaction) -> None: ...

    def get(self, transaction_id: str) -> Optional[ContractTransaction]: ...

    def list_for_league(self, league_id: str) -> List[ContractTransaction]: ...


class InMemoryContractStore:
    """Process-local store; one instance is created per app."""

    def __init__(self):
        self._transactions: Dict[str, ContractTransaction] = {}

    def add(self, transaction: ContractTransaction) -> None:
        self._transactions[transaction.id] = transaction

    def get(self, transaction_id: str) -> Optional[ContractTransaction]:
        return self._transactions.get(transaction_id)

    def list_for_league(self, league_id: str) -> List[ContractTransaction]:
        return sorted(
            (t for t in self._transactions.values() if t.league_id == league_id),
            key=lambda t: t.submitted_at,
        )


def submit_contract(
    store: ContractTransactionStore,
    league_id: str,
    franchise_id: str,
    player_id: str,
    old_years: int,
    new_years: int,
    now: Optional[datetime] = None,
) -> ContractTransaction:
    """Validate a contract change and record it, rejected or not."""
    now = now or datetime.now(LEAGUE_TZ)
    result = validate_contract_submission(league_id, old_years, new_years, player_id, franchise_id, now=now)
    transaction = ContractTransaction(
        id=f"TXN_{uuid.uuid4().hex[:12]}",
        league_id=league_id,
        franchise_id=franchise_id,
        player_id=player_id,
        old_contract_years=old_years,
        new_contract_years=new_years,
        submitted_at=now,
        status="pending" if result.valid else "rejected",
        errors=list(result.errors),
    )
    store.add(transaction)
    return transaction
