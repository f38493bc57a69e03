"""Utility modules for the machine template webhook."""
