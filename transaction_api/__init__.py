"""
Transaction API.

REST resource over a pluggable transaction service.
"""
