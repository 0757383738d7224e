"""
Academy Contact Package

Public contact form. Forwards the message to the site team and confirms
receipt to the sender.
"""
