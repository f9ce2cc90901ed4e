"""
wikiroundtrip: the round-trip core of a wikitext <-> HTML converter.

Token transformers for the forward direction, a replay oracle that checks
them against recorded transcripts, and a separator-aware serializer for the
reverse direction.
"""

__version__ = "0.1.0"
