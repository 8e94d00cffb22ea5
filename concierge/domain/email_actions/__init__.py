"""Email action links - tokens, one-click handlers and their HTML pages"""
