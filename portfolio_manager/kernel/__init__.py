"""
Kernel - models, storage contracts, authorization and ordering primitives.
"""
