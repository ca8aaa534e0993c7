"""Taskboard Core -- 领域模型、视图组合、统计、检查清单、本地存储"""
