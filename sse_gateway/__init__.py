"""
SSE Gateway

Forwards JSON-described HTTP requests to an upstream and relays the response,
aggregating Server-Sent-Events streams into one synchronous body.
"""

__version__ = "0.1.0"
