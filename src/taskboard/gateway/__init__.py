"""Taskboard Gateway -- FastAPI 应用"""
