"""
Shared HTTP session setup for outbound calls.
"""

import requests

from whereami import __version__

USER_AGENT = f"whereami/{__version__}"


def create_session() -> requests.Session:
    """New requests session carrying the service User-Agent."""
    session = requests.Session()
    session.headers.update({
        "User-Agent": USER_AGENT
    })
    return session
