"""Car submission fan-out.

Accepts a seller's car submission with photos and delivers it to every
channel configured for the submission type (email inbox, WhatsApp).
"""
