"""
Startup orchestration.

Sequences the configuration sources (config service, local .env, defaults)
into a single run-to-completion load at process start.
"""
