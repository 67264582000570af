"""Infrastructure layer for the Jazz Piano Trainer.

Modules:
    metrics     Prometheus metrics registry.
"""
