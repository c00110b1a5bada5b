"""Labour ledger: attendance, wages and payments for day-labour workers."""

__version__ = "0.1.0"
