"""
webfilter-core
==============
Web-filter record contract executed inside a host ledger's transactions.

Provides:
- FilterRecord schema and deterministic encoding
- RecordContract operations over an injected world state
- In-memory and SQLite world state providers for tests and local runs
"""

from .context import TransactionContext, TransactionStub, run_in_transaction
from .contract import RecordContract
from .dispatch import ContractDispatcher
from .record import FilterRecord
from .seeds import DEFAULT_SEED_TABLE, SeedTable, load_seed_table

__all__ = [
    "TransactionContext",
    "TransactionStub",
    "run_in_transaction",
    "RecordContract",
    "ContractDispatcher",
    "FilterRecord",
    "DEFAULT_SEED_TABLE",
    "SeedTable",
    "load_seed_table",
]
