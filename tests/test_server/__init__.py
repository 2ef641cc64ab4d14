"""HTTP request surface tests"""
