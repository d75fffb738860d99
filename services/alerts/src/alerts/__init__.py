"""
SecureYou Alert Dispatch Service.

Delivers SOS alerts to a user's emergency contacts over SMS (Twilio) and
email (SendGrid), reporting the outcome of each channel separately.
"""
