"""
Portfolio Manager

Multi-tenant portfolio content core: ownership authorization over the
resource tree, ordered sibling collections and an audited mutation trail.
"""
