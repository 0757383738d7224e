"""
Academy Content Package

Admin-curated FAQs and podcasts with public, paginated listings.
"""
