"""
Orchestration layer: scan context, worker pipeline, exceptions.
"""
