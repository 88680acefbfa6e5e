"""
HTTP API for the Resource Allocation Graph simulator.
"""
