"""Application environment types.

Defines the runtime environments the server can be started in.
Used by Settings to determine environment-specific behavior.

Environments:
- DEVELOPMENT: Local development, human-readable logs, detailed errors
- TESTING: Automated test execution, JSON logs
- CI: Continuous integration environment
- PRODUCTION: Production deployment, generic error messages only
"""

from enum import Enum


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    CI = "ci"
    PRODUCTION = "production"
