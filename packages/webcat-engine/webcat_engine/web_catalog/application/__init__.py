"""Web Catalog Application"""
