"""FinanceAgent - conversational finance assistant with price alerts."""

__version__ = "0.1.0"
