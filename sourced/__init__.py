"""sourced-core: shared process resources for sourced services.

Layout:
- common: configuration, logging, tracing, database handle, temporary filesystem
- schemas: pydantic models for repositories and mentions
- clients: PostgreSQL stores bound to the shared database handle
- core: the lazy singleton container wiring all of the above
"""
