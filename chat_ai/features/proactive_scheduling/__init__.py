"""
Proactive scheduling feature: detects scheduling intent in team conversations
and suggests meeting times.
"""
