"""Core configuration and capture-layer models"""
