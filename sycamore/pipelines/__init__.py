"""
Sycamore Pipelines.

Business logic orchestration functions.
"""
