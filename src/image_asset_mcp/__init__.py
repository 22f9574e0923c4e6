"""
Image Asset MCP Server
======================

Generate image assets from text descriptions and save them as PNG files.

Supported Providers (one active per process):
- Google Gemini (GEMINI_API_KEY, preferred)
- OpenAI DALL-E (OPENAI_API_KEY)
"""

__version__ = "1.0.0"
