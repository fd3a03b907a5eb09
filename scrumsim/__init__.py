"""
Scrum Delivery Simulator

A day-by-day simulation engine for Scrum teams: generates a team and
backlog, plans sprints against a running velocity, plays out each working
day under random events and impediments, and aggregates the results into
comparable metrics.
"""

__version__ = "1.0.0"
__author__ = "Scrum Simulator Team"
