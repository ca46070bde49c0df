"""
Domain layer for the Cloudflare DNS scanner.

This layer contains:
- Data models (alerts, scanner configuration, scan and delivery outcomes)
- Validation (defaults and required-field checks)
- Business logic (record filtering, zone scanning, notification, orchestration)
"""
