"""
Logger Utility
Centralized logging configuration
"""

import logging
import sys
import threading
from datetime import datetime
from pathlib import Path
from typing import Optional, Union
import json

def setup_logger(name: str,
                 level: str = "INFO",
                 log_dir: Optional[Union[str, Path]] = None) -> logging.Logger:
    """
    Setup logger with consistent formatting
    
    Args:
        name: Logger name
        level: Logging level
        log_dir: Directory for the daily error log (no file logging when None)
        
    Returns:
        Configured logger
    """
    
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    
    # Format
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    
    # Console handler (avoid duplicates on repeated setup)
    if not any(type(h) is logging.StreamHandler for h in logger.handlers):
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)
    
    # File handler for errors
    if log_dir and not any(isinstance(h, logging.FileHandler) for h in logger.handlers):
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        
        error_handler = logging.FileHandler(
            log_path / f"errors_{datetime.now().strftime('%Y%m%d')}.log"
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        logger.addHandler(error_handler)
    
    return logger

class AuditLogger:
    """
    Audit logger recording every deadline calculation request
    """
    
    def __init__(self, log_file: str = "audit.jsonl", log_dir: Union[str, Path] = "logs"):
        """Initialize audit logger"""
        
        self.log_file = Path(log_dir) / log_file
        self.log_file.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
    
    def log(self, event: str, data: dict):
        """
        Log audit event
        
        Args:
            event: Event type
            data: Event data
        """
        
        entry = {
            "timestamp": datetime.now().isoformat(),
            "event": event,
            "data": data
        }
        
        line = json.dumps(entry, default=str) + "\n"

        # Batch workers share one file
        with self._lock:
            with open(self.log_file, "a", encoding="utf-8") as f:
                f.write(line)
