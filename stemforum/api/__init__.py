"""
API routes and endpoints
"""
