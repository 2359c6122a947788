"""
Run tracking state machine module.

Manages the loop run lifecycle (IDLE → TRACKING → STOPPED), the position
and tick subscriptions that drive it, and the read-only snapshots handed to
display collaborators.
"""
