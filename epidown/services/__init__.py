"""
Services module.

Contains the business logic of EpiDown: episode search, release parsing,
need decisions, download hand-off and background queues.
"""
