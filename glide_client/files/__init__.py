"""
File transfer module for client-side file operations.

Handles:
- Chunked file uploads after a glide request is sent
- Chunked file downloads after a request is accepted
- File transfer progress tracking
"""
