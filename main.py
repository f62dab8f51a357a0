"""
Main application entry point for the URL content chatbot.
"""

from url_content_chatbot.cli import app


if __name__ == "__main__":
    app()
