"""
Core lookup logic for the gateway.

This module is framework-agnostic - it doesn't import FastAPI, boto3,
or any configuration code. That keeps the fallback rules testable with
in-memory backends.
"""
