"""
Algorithms package for the Banker's Algorithm Safety Checker.
Contains the deadlock avoidance (Banker's) safety check.
"""
