"""
Ledger submission module.

Pluggable collaborators that accept a RunRecord and perform the actual
write. The core never retries; it only surfaces the reported result.
"""
