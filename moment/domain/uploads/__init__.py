"""Uploads Domain - file relay to object storage"""
