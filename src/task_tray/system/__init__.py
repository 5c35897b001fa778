"""Default OS integrations: opener, autostart, clipboard helpers, HTML preview."""
