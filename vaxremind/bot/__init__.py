"""Operator Telegram bot for on-demand reminder runs."""
