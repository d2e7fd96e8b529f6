"""Integrations with external services"""
