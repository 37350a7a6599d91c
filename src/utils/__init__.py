"""
Generic utility functions shared across modules.

Includes logging setup driven by the resolved configuration.
"""
