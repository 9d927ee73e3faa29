"""
Uptime Status Proxy
===================

FastAPI service that forwards status-page monitor queries to UptimeRobot
while keeping the API key on the server.
"""
