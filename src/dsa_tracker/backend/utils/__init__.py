"""Utility helpers shared by the services"""
