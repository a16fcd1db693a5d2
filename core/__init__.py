"""
Core module of the service.
Runtime wiring, per-entity locking and structured logging.
"""
