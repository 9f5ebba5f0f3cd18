"""Aggregation of declared-person records.

This package contains the group-key codec, the bucket statistics builder and
the mapping from computed groups to report rows.
"""
