"""Retrieval helpers for the declared persons OData service.

Builds `$filter` queries, performs the HTTP request and validates the
returned records into `DeclaredPerson` models.
"""
