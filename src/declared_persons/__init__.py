"""declared_persons package.

Contains modules for fetching declared-person records for a district from
the Riga open data OData service, grouping them into time buckets, computing
per-bucket statistics and writing the result as a JSON report.

Architecture:
- Ingest → Aggregate → Export, all in memory for a single request
- pandas is used for the per-bucket statistics
- Pydantic models validate incoming records and shape the report rows
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
