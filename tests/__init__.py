"""
Tests package - Test suite for the machine template webhook.

Contains:
- unit/: Unit tests for individual components, run without a cluster
"""
