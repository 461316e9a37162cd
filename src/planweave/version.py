"""
Central version constant for planweave.
"""

__version__ = "0.4.0"

# Schema version of the JSON plan format written by plans.serialization
PLAN_SCHEMA_VERSION = "1.0"
