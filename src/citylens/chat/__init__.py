"""Conversation turn handling."""
