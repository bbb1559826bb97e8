"""
Service layer for the proactive scheduling feature.
"""
