"""
Core utility modules for Lambda function.

This package contains Lambda-specific utilities for:
- Credential resolution (environment, AWS Secrets Manager)
- HTTP response handling
- Configuration constants and per-invocation settings
"""
