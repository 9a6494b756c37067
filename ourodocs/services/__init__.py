"""
Services: file access, settings persistence and highlight output formats.
"""
