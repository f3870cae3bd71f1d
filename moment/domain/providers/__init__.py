"""Providers Domain - business profiles, approval status and publishing"""
