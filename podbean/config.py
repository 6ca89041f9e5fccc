"""
Configuration for the Podbean client.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Union

DEFAULT_BASE_URL = "https://api.podbean.com/v1"


@dataclass
class PodbeanConfig:
    """Complete client configuration."""
    # OAuth application
    client_id: str = ""
    client_secret: str = ""
    
    # API endpoint
    base_url: str = DEFAULT_BASE_URL
    
    # Outbound rate limit
    requests_per_minute: int = 60
    rate_limit_window: float = 60.0
    block_on_rate_limit: bool = True  # False raises RateLimitError instead of waiting
    
    # Timeouts
    request_timeout: float = 30.0
    token_expiry_margin: float = 300.0  # Refresh this many seconds before expiry


def load_config(config_path: Union[str, Path]) -> PodbeanConfig:
    """Load configuration from JSON file.
    
    Expected layout::
    
        {
            "podbean": {"client_id": "...", "client_secret": "...", "base_url": "..."},
            "rate_limit": {"requests_per_minute": 60, "window": 60, "blocking": true},
            "request_timeout": 30,
            "token_expiry_margin": 300
        }
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    
    with open(config_path) as f:
        data = json.load(f)
    
    # Credentials
    pb = data.get("podbean", {})
    
    # Rate limit settings
    rl = data.get("rate_limit", {})
    
    return PodbeanConfig(
        client_id=pb.get("client_id", ""),
        client_secret=pb.get("client_secret", ""),
        base_url=pb.get("base_url", DEFAULT_BASE_URL),
        requests_per_minute=rl.get("requests_per_minute", 60),
        rate_limit_window=rl.get("window", 60.0),
        block_on_rate_limit=rl.get("blocking", True),
        request_timeout=data.get("request_timeout", 30.0),
        token_expiry_margin=data.get("token_expiry_margin", 300.0),
    )
