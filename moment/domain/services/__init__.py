"""Services Domain - offerings listed under a provider"""
