"""
Algorithms package for the Resource Allocation Graph simulator.
Contains the allocation engine and wait-for graph deadlock detection.
"""
