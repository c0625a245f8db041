"""Synchronization engine for BMKG earthquake feeds."""
