"""
Pure scheduling pipeline: segmentation, extraction, hint scanning and synthesis.
"""
