"""
Room Gateway - Front door for the multiplayer session lifecycle

Responsibilities:
- Resolve callers to one canonical user (access token or temporary account)
- Join/leave rooms across the users and rooms services
- Compensate partial failures (temporary account cleanup)
- Create rooms, look up roles, start/end games
- Normalize every failure into {status, message}
"""
