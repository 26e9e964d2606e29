"""
Configuration management for the Storage Gateway.

Contains Pydantic settings and the connection-string resolution rules shared
by the local-dev, aws-mock, and aws-prod deployment modes.
"""
