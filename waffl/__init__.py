"""Notification fan-out and read-state service for the Waffl video app."""
