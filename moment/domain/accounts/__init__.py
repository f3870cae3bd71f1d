"""Accounts Domain - registration, provisioning and role claims"""
