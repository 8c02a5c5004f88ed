"""
Readwise Reader → uniform request/response bridge

An async client for the Readwise Reader API with rate-limit retries,
cursor aggregation, guarded full-content listings and batched bulk
operations. Every operation returns a data payload plus advisory
messages.
"""

__version__ = "0.1.0"
