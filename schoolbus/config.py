"""
Configuration module for the school bus core.

Centralizes the tunable constants used by the route optimizer and the
roster reconciler. Values are read from environment variables when the
module is imported.
"""

import os


class Config:
    """Core configuration loaded from environment variables."""

    # Route optimization
    AVERAGE_SPEED_KMH: float = float(os.getenv("SCHOOLBUS_AVERAGE_SPEED_KMH", "30.0"))
    EARTH_RADIUS_KM: float = float(os.getenv("SCHOOLBUS_EARTH_RADIUS_KM", "6371.0"))
    DISTANCE_DECIMALS: int = int(os.getenv("SCHOOLBUS_DISTANCE_DECIMALS", "2"))

    # Logging
    LOG_LEVEL: str = os.getenv("SCHOOLBUS_LOG_LEVEL", "INFO").strip().upper() or "INFO"
    LOG_FORMAT: str = os.getenv(
        "SCHOOLBUS_LOG_FORMAT",
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    @classmethod
    def get_config_dict(cls) -> dict:
        """Return configuration as dictionary (for debugging)."""
        return {
            "AVERAGE_SPEED_KMH": cls.AVERAGE_SPEED_KMH,
            "EARTH_RADIUS_KM": cls.EARTH_RADIUS_KM,
            "DISTANCE_DECIMALS": cls.DISTANCE_DECIMALS,
            "LOG_LEVEL": cls.LOG_LEVEL,
        }


# Global configuration instance
config = Config()
