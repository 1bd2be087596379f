"""Core functionality of rpbands."""
