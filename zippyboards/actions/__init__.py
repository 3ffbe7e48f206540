"""
Server actions.

Each action takes the caller's data service client (and, where it needs to
bypass row-level security, an elevated one) and reports failures in its
return value instead of raising.
"""
from zippyboards.actions.members import add_member, remove_member

__all__ = ["add_member", "remove_member"]
