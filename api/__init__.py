"""
HTTP API package for the Business Card Extractor.
"""
