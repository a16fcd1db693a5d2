"""
Centralised service configuration.
Every environment variable and tunable constant is defined here.
"""

import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


# ============================================================================
# SERVICE CONFIGURATION
# ============================================================================
class ServiceConfig:
    """General FastAPI service configuration."""

    HOST = os.getenv("SERVICE_HOST", "0.0.0.0")
    PORT = int(os.getenv("SERVICE_PORT", "8000"))

    APP_NAME = "fleet-telemetry"
    APP_VERSION = "0.1.0"

    ENVIRONMENT = os.getenv("ENVIRONMENT", "production")


# ============================================================================
# LOGGING CONFIGURATION
# ============================================================================
class LoggingConfig:
    """Structured logging output."""

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Empty means stdout only
    LOG_FILE = os.getenv("LOG_FILE", "")


# ============================================================================
# ALERT RULE CONFIGURATION
# ============================================================================
class AlertRuleConfig:
    """Default thresholds for the rule engine."""

    SPEED_LIMIT = float(os.getenv("SPEED_LIMIT", "80"))                          # km/h
    LOW_FUEL_THRESHOLD = float(os.getenv("LOW_FUEL_THRESHOLD", "15"))            # %
    LOW_BATTERY_THRESHOLD = float(os.getenv("LOW_BATTERY_THRESHOLD", "15"))      # %
    HIGH_ENGINE_TEMP_THRESHOLD = float(os.getenv("HIGH_ENGINE_TEMP_THRESHOLD", "110"))  # Celsius


# ============================================================================
# ANALYTICS CONFIGURATION
# ============================================================================
class AnalyticsConfig:
    """Trailing window used by fleet analytics."""

    DEFAULT_WINDOW_HOURS = float(os.getenv("ANALYTICS_WINDOW_HOURS", "24"))
    MAX_WINDOW_HOURS = float(os.getenv("ANALYTICS_MAX_WINDOW_HOURS", "720"))


# ============================================================================
# TELEMETRY CONFIGURATION
# ============================================================================
class TelemetryConfig:
    """Ingestion limits."""

    MAX_BATCH_SIZE = int(os.getenv("MAX_BATCH_SIZE", "1000"))
