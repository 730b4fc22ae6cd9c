"""futuresim - simulated commodity futures trading ledger."""

__version__ = "0.1.0"
