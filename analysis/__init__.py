"""
Analysis package for the Resource Allocation Graph simulator.
Contains the event log.
"""
