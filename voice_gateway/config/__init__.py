"""
Configuration module for the voice gateway.

This module provides centralized configuration management for the entire application,
including constants, logging setup, and environment-based settings.

Key components:
- constants: Application-wide constants such as close codes, close reasons,
  envelope type tags and the speech engine defaults.
- logging_config: Console and rotating-file logging for the application logger.
- settings: The ``Settings`` dataclass read from environment variables.

Usage examples:
```python
from voice_gateway.config.constants import CLOSE_POLICY_VIOLATION
from voice_gateway.config.logging_config import configure_logging
from voice_gateway.config.settings import get_settings

logger = configure_logging()
settings = get_settings()
logger.info(f"Using model {settings.gemini_model}")
```
"""
