"""Probe report output."""
