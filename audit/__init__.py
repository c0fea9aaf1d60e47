"""
Centralized Audit Logging System

Tracks who did what, when, and on which property for every tenant lifecycle
and inventory change.
"""
