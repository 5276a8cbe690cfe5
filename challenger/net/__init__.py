from .ledger import LedgerQueryAdapter, ZERO_ADDRESS, encode_call, selector
from .sender import TransactionSender, receipt_succeeded

__all__ = [
    "LedgerQueryAdapter",
    "TransactionSender",
    "ZERO_ADDRESS",
    "encode_call",
    "selector",
    "receipt_succeeded",
]
