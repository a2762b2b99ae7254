"""
Client package for the Glide file-sharing service.

This package contains the client-side session engine:
- Username handshake
- Command dispatch over a lockstep connection
- Chunked file upload and download
- Configuration and utilities
"""
