"""
readme_sync - README job-table synchronization

Exports verified job postings and merges them into an anchor-delimited Markdown
table in a repository README, keeping rows added by hand.

Architecture:
- Table Context: locating, parsing, normalizing, rendering and merging the table
- Sync Context: job export, document stores, and the sync orchestrator
"""

__version__ = "0.1.0"
