#!/usr/bin/env python3
"""
config.py

Global configuration parameters: retry bounds and logging setup.
"""

# Upper bound for every retry loop (signing, key generation, CSPRNG reads).
# A safety valve: a healthy primitive converges on the first attempt.
MAX_ATTEMPTS = 1024

# Seconds to sleep between failed attempts. Zero means retry immediately.
RETRY_BACKOFF = 0.0

# All modules log through this logger:
LOGGER_NAME = "ChainCrypt"
LOG_FORMAT = "[%(asctime)s] %(levelname)s - %(name)s - %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
