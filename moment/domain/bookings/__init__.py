"""Bookings Domain - booking requests and their status lifecycle"""
