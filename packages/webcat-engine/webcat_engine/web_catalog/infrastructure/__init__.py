"""Web Catalog Infrastructure"""
