"""Concierge backend - consultations, admin management and transactional email"""
