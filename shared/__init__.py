"""
Shared building blocks for the NexProLink runtime utilities.

Contains the document store abstraction, collection/table name
configuration, and logging/metrics helpers used by both the call
quality monitor and the offline sync queue.
"""
