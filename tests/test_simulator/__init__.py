"""
Simulator Tests

Tests for the simulator package:
- Elevator state machine (invariant checks, audit events)
- Movement simulator (floor stepping, door sequence, abandonment)
- State stores (in-memory and SQLite)
- Wall-clock environment
"""
