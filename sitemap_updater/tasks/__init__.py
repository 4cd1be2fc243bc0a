"""
Background tasks — filesystem watching.
"""
