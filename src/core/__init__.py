"""
Core building blocks shared across services
"""
