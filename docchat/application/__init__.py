"""
Application layer.

Services used by the HTTP routes and workers, plus the factories that wire
core components to their adapters from settings.
"""
