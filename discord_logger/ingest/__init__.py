"""Gateway event ingestion.

Turns discord.py callbacks into typed events, filters out webhook and system
messages, normalizes payloads and hands them to the message logger service.
"""
