"""
Shared protocol package for the Glide file-sharing client.

This package contains everything that describes the wire protocol:
- Framing of text frames and transfer metadata
- The operator command grammar
- Classification of server responses
- Error taxonomy
"""
