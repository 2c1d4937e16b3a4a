"""Operator tooling for the blog: server updates and site deploys."""

__version__ = "0.1.0"
