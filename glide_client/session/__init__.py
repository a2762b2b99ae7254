"""
Session module for the Glide client.

Handles:
- Username handshake before the command loop
- Lockstep command dispatch
- Handoff between the operator and the connection
"""
