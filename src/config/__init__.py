"""
Environment access, local .env loading, and resolution of the final AppConfig.

Provides the EnvSource abstraction every configuration source writes through,
and the strongly typed, immutable settings object built from it.
"""
