"""Application tracking - job applications submitted for clients and their update emails"""
