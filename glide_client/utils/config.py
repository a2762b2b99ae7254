"""
Client configuration module.

This module handles client-side configuration settings.
"""

import logging

from glide_common.constants import (
    DEFAULT_HOST, DEFAULT_PORT, CHUNK_SIZE, DOWNLOAD_DIR, CONNECT_ATTEMPTS, CONNECT_DELAY_BASE
)


class ClientConfig:
    """Client configuration class."""
    
    def __init__(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT,
                 download_dir: str = DOWNLOAD_DIR, safe_filenames: bool = False,
                 log_level: int = logging.WARNING):
        self.host = host
        self.port = port
        
        # File transfer settings
        self.chunk_size = CHUNK_SIZE
        self.download_dir = download_dir
        self.safe_filenames = safe_filenames  # reduce received names to a basename
        
        # Connection settings
        self.connect_attempts = CONNECT_ATTEMPTS
        self.connect_delay_base = CONNECT_DELAY_BASE
        
        # Logging
        self.log_level = log_level
    
    def get_connection_info(self):
        """Get connection information."""
        return {
            'host': self.host,
            'port': self.port,
            'attempts': self.connect_attempts,
            'delay_base': self.connect_delay_base
        }
    
    def get_transfer_settings(self):
        """Get file transfer settings."""
        return {
            'chunk_size': self.chunk_size,
            'download_dir': self.download_dir,
            'safe_filenames': self.safe_filenames
        }
