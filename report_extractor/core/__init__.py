"""Core clients, configuration primitives and exceptions."""
