"""Warranty notification service package.

Holds the warranty expiration monitor, the notification router and the
phone verification state machine together with the HTTP surface exposing
them.
"""
