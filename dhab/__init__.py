"""
Dhab - A Decentralized Anonymous Recovery App

A self-hosted Python service for tracking time away from a habit,
projecting what that time has saved, and sharing progress with an
anonymous community of people quitting the same thing.
"""

__version__ = "0.1.0"
