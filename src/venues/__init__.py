"""
Clients for external services.

Currently the remote configuration service that serves startup secrets.
"""
