"""Checklist commands (steps, show, run)."""
