"""Diagnostics package.

- month_grid: plain-text month calendars (no extra dependencies)
- phase_plot: satellite phase curves (requires the diagnostics extras)
"""

__all__ = ["month_grid", "phase_plot"]
