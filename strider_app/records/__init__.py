"""
Run record module.

Turns a stopped, validated run into the immutable record handed to a
ledger submission collaborator.
"""
