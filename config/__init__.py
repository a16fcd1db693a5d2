"""
Configuration module.
"""

from .settings import (
    ServiceConfig,
    LoggingConfig,
    AlertRuleConfig,
    AnalyticsConfig,
    TelemetryConfig,
)

__all__ = [
    "ServiceConfig",
    "LoggingConfig",
    "AlertRuleConfig",
    "AnalyticsConfig",
    "TelemetryConfig",
]
