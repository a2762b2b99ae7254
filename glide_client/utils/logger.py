"""
Client logging module.

This module handles client-side logging functionality. Log records go to
stderr so they never interleave with operator output on stdout.
"""

import logging
import sys


class ClientLogger:
    """Client logging class."""
    
    def __init__(self, log_level: int = logging.WARNING):
        self.logger = logging.getLogger('glide_client')
        self.logger.setLevel(log_level)
        
        # Remove existing handlers
        for handler in self.logger.handlers[:]:
            self.logger.removeHandler(handler)
        
        # Create console handler
        self.console_handler = logging.StreamHandler(sys.stderr)
        self.console_handler.setLevel(log_level)
        
        # Create formatter
        formatter = logging.Formatter(
            '%(asctime)s [%(levelname)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        self.console_handler.setFormatter(formatter)
        
        # Add handler to logger
        self.logger.addHandler(self.console_handler)
    
    def set_level(self, log_level: int):
        """Change the level of the logger and its console handler."""
        self.logger.setLevel(log_level)
        self.console_handler.setLevel(log_level)
    
    def info(self, message: str):
        """Log info message."""
        self.logger.info(message)
    
    def error(self, message: str):
        """Log error message."""
        self.logger.error(message)
    
    def warning(self, message: str):
        """Log warning message."""
        self.logger.warning(message)
    
    def debug(self, message: str):
        """Log debug message."""
        self.logger.debug(message)
    
    def log_connection(self, host: str, port: int, success: bool):
        """Log connection attempt."""
        status = "Connected" if success else "Failed to connect"
        self.info(f"{status} to {host}:{port}")
    
    def log_login(self, username: str, success: bool, reason: str = ""):
        """Log username negotiation result."""
        if success:
            self.info(f"Logged in as @{username}")
        else:
            self.info(f"Server rejected username '{username}': {reason}")
    
    def log_command(self, command: str, response: str):
        """Log a command round trip."""
        self.debug(f"Command '{command}' -> {response}")
    
    def log_transfer(self, direction: str, filename: str, transferred: int, size: int):
        """Log the end of a file transfer."""
        if transferred == size:
            self.info(f"{direction} complete: {filename} ({size} bytes)")
        else:
            self.warning(f"{direction} short: {filename} ({transferred}/{size} bytes)")
    
    def log_error(self, operation: str, error: Exception):
        """Log error with operation context."""
        self.error(f"Error in {operation}: {error}")


# Global logger instance
logger = ClientLogger()
