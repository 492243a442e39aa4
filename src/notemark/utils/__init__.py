"""Utility helpers for notemark."""
