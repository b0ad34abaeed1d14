"""Painkiller Habits: personal habit tracking with streaks and a yearly heatmap."""

__version__ = "1.0.0"
