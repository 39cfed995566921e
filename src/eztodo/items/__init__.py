"""
Todo / plan subsystem.

Components:
- models.py: data structures (Todo, Plan, HistoryRecord, create inputs)
- stores.py: JSON-backed TodoStore / PlanStore
- recurrence.py: plan cycle reset rules + batch refresh
- history.py: activity events derived from todo timestamps
- tracker.py: high-level operations used by the CLI and the refresher
- refresher.py: background polling loop that refreshes plans
"""
