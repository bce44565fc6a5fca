"""shapleyad: advertising-attribution records kept in an opaque key-value ledger."""

__version__ = "0.1.0"
