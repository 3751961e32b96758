"""
ReWeara email package.

Modules:
- client: SendGrid v3 REST client
- core: send_email, with console fallback when SendGrid is not configured
- store: order and contact-form templates
"""
