"""
Utilities for the Resource Allocation Graph simulator: logging, configuration
and scenario loading.
"""
