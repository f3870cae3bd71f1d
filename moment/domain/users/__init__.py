"""Users Domain - profile documents keyed by Firebase uid"""
