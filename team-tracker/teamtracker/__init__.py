"""Team task & revenue tracker.

This package contains the date-range core behind the tracker pages:
- Period overlap filtering of date-ranged tasks against reporting windows.
- Per-member lane assignment for the team calendar grid.
- Dashboard aggregation (scheduled vs. completed amounts and points).
- A SQLAlchemy-backed store for tasks, members and monthly goals.
"""
