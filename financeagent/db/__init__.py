"""Persistence layer for FinanceAgent."""
