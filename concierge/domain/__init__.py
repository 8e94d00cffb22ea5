"""Domain packages: repository, service and router per business area"""
