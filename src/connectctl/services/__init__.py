"""Service layer — the connection engine and its result-returning facade.

Services may import from domain, infrastructure, plugins and config.
They must never import from commands or output.
"""
