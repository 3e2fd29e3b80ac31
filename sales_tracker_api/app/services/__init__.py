"""
Service layer.

Each service encapsulates the business logic and SQL for one domain so
that API handlers stay thin and never touch the database directly.
"""
