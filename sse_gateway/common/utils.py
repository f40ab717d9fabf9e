"""
Utility Functions
"""

import uuid


def generate_trace_id() -> str:
    """
    Generate a request trace ID

    Used to correlate the log lines of one proxied request.

    Returns:
        str: UUID4 string
    """
    return str(uuid.uuid4())
