"""Event recorder tests"""
