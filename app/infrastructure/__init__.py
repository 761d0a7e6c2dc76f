"""Infrastructure modules for the Torn OC items bot.

Centralized infrastructure components:
- configuration: Settings management (settings, Settings)
- logging: Structured logging (configure_logging, get_module_logger)
- resilience: Retry executor, resilience profiles and circuit breaker
- caching: In-memory TTL cache for API lookups
- clients: Google Sheets client and session provider
"""
