"""
Origin package for the Lessons Service: the GitHub contents API client.
"""
