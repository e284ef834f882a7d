"""Telegram bot entry point."""
