"""
Models package for the Resource Allocation Graph simulator.
Contains processes, resources, the resource ledger and the request queue.
"""
