"""Domain layer — connection value type, filters, batch commands, errors.

This layer depends only on stdlib.
It must never import from services, infrastructure, commands, or config.
"""
