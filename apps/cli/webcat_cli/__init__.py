"""Web Catalog CLI"""
