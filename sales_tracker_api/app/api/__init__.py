"""
API package containing versioned routes.

``v1`` exposes a top-level ``router`` that the application mounts
under ``/api``.
"""
