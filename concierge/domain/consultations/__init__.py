"""Consultation domain - public booking form and admin status changes"""
