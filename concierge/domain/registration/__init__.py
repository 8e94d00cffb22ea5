"""Registration domain - payment confirmation and client sign-up"""
