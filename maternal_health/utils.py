"""
Utility functions for the maternal health analysis.
"""

import logging
import sys
from typing import List, Optional


def setup_logging(level: str = "INFO") -> None:
    """Setup logging configuration."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )


def parse_csv_list(value: Optional[str]) -> Optional[List[str]]:
    """Split a comma-separated CLI value into stripped, non-empty items."""
    if value is None:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]
