"""Admin domain - login and admin account management"""
