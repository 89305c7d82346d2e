"""Tradeflow core library (checklist state machine, configuration, logging)."""
