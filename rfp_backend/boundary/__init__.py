"""
Boundary adapters for external systems (AWS, database).
"""
